"""Raffle administration: ticket allocation, weighted draws and winner records."""
