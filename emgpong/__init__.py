"""Pong steered by UDP values, with ADS1015/ADS1115 reading, high-pass processing and UDP streaming."""

__version__ = "0.1.0"

__all__ = ["ads1115", "app", "pong", "processing", "registers", "udp"]