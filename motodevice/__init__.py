"""Device support utilities: queues, timers, target detection, logging, config, lights, power and fs config."""

__version__ = "0.1.0"

__all__ = [
    "linkedlist",
    "msgqueue",
    "target",
    "timer",
    "loclog",
    "config",
    "lights",
    "power",
    "fsconfig",
]