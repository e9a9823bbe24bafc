"""Nearby fuel-station finder backed by the Spanish government price feed."""
