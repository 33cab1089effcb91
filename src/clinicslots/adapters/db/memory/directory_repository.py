"""
In-memory implementations of the directory repositories.
"""

import copy
from typing import Dict, List, Optional

from clinicslots.application.ports.repositories.department_repo import DepartmentRepository
from clinicslots.application.ports.repositories.doctor_repo import DoctorRepository
from clinicslots.application.ports.repositories.patient_repo import PatientRepository
from clinicslots.domain.entities.department import Department
from clinicslots.domain.entities.doctor import Doctor
from clinicslots.domain.entities.patient import Patient
from clinicslots.domain.value_objects.identifiers import DoctorId, PatientId


class InMemoryDoctorRepository(DoctorRepository):
    """Dict-backed doctor store."""

    def __init__(self) -> None:
        self._doctors: Dict[str, Doctor] = {}

    async def save(self, doctor: Doctor) -> Doctor:
        self._doctors[doctor.doctor_id.value] = copy.deepcopy(doctor)
        return copy.deepcopy(doctor)

    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        doctor = self._doctors.get(doctor_id.value)
        return copy.deepcopy(doctor) if doctor else None

    async def exists_by_id(self, doctor_id: DoctorId) -> bool:
        return doctor_id.value in self._doctors

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Doctor]:
        ordered = sorted(self._doctors.values(), key=lambda d: d.doctor_id.value)
        return [copy.deepcopy(d) for d in ordered[offset:offset + limit]]

    async def delete(self, doctor_id: DoctorId) -> bool:
        return self._doctors.pop(doctor_id.value, None) is not None


class InMemoryPatientRepository(PatientRepository):
    """Dict-backed patient store."""

    def __init__(self) -> None:
        self._patients: Dict[str, Patient] = {}

    async def save(self, patient: Patient) -> Patient:
        self._patients[patient.patient_id.value] = copy.deepcopy(patient)
        return copy.deepcopy(patient)

    async def find_by_id(self, patient_id: PatientId) -> Optional[Patient]:
        patient = self._patients.get(patient_id.value)
        return copy.deepcopy(patient) if patient else None

    async def exists_by_id(self, patient_id: PatientId) -> bool:
        return patient_id.value in self._patients

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Patient]:
        ordered = sorted(self._patients.values(), key=lambda p: p.patient_id.value)
        return [copy.deepcopy(p) for p in ordered[offset:offset + limit]]

    async def delete(self, patient_id: PatientId) -> bool:
        return self._patients.pop(patient_id.value, None) is not None


class InMemoryDepartmentRepository(DepartmentRepository):
    """Dict-backed department store with an ordered membership index."""

    def __init__(self) -> None:
        self._departments: Dict[str, Department] = {}
        self._members: Dict[str, List[str]] = {}

    async def save(self, department: Department) -> Department:
        self._departments[department.name] = copy.deepcopy(department)
        self._members.setdefault(department.name, [])
        return copy.deepcopy(department)

    async def find_by_name(self, name: str) -> Optional[Department]:
        department = self._departments.get(name)
        return copy.deepcopy(department) if department else None

    async def find_all(self) -> List[Department]:
        return [copy.deepcopy(self._departments[name]) for name in sorted(self._departments)]

    async def delete(self, name: str) -> bool:
        self._members.pop(name, None)
        return self._departments.pop(name, None) is not None

    async def add_member(self, name: str, doctor_id: DoctorId) -> bool:
        members = self._members.setdefault(name, [])
        if doctor_id.value in members:
            return False
        members.append(doctor_id.value)
        return True

    async def remove_member(self, name: str, doctor_id: DoctorId) -> bool:
        members = self._members.get(name, [])
        if doctor_id.value not in members:
            return False
        members.remove(doctor_id.value)
        return True

    async def list_members(self, name: str) -> List[DoctorId]:
        return [DoctorId(value) for value in self._members.get(name, [])]
