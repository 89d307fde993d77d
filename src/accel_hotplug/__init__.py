"""
Accelerator Hotplug - managed PCIe hotplug for accelerator cards

Quiesces and removes an accelerator's PCI functions through sysfs and
re-discovers the card later by rescanning its root port.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
