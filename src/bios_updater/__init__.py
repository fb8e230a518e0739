"""BIOS updater.

Checks a vendor API for newer motherboard BIOS releases, downloads them
and announces them over MQTT.
"""

__version__ = "1.0.0"
