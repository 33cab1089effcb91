"""
Clinic-Slots: appointment slot allocation for clinics

Doctors publish capacity-bounded schedules; patients book units of that
capacity. The booking core keeps capacity accounting and the reservation
ledger consistent under concurrent requests.
"""

__version__ = "0.1.0"
__author__ = "Clinic-Slots Team"
__description__ = "Clinic appointment slot allocation service"
