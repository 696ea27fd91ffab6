"""Smart room monitoring simulation.

Simulated sensors produce randomized readings, a monitoring service
records them and threshold strategies switch simulated devices.
"""

__version__ = "0.1.0"
