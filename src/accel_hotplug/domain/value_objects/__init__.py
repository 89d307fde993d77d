"""Value objects for the hotplug domain.

Exports:
    - PCIeBusId, PCIeSlotId: sysfs names of a function and of a slot
    - PciAddress: parsed BDF address
    - FunctionRole, DeviceReference: which function of which card
    - HardwareIdentity, ACCELERATOR_IDENTITY: root-port match target
"""

from accel_hotplug.domain.value_objects.identifiers import (
    ACCELERATOR_IDENTITY,
    XILINX_US_DEVICE_ID,
    XILINX_VENDOR_ID,
    DeviceReference,
    FunctionRole,
    HardwareIdentity,
    PCIeBusId,
    PCIeSlotId,
    PciAddress,
    create_device_reference,
)

__all__ = [
    "PCIeBusId",
    "PCIeSlotId",
    "PciAddress",
    "FunctionRole",
    "DeviceReference",
    "HardwareIdentity",
    "ACCELERATOR_IDENTITY",
    "XILINX_VENDOR_ID",
    "XILINX_US_DEVICE_ID",
    "create_device_reference",
]
