"""
Directory of doctors, patients and departments.

These records are collaborators of the booking core: schedules point at
doctors, reservations at patients. Department membership is kept as an
ordered relation in the department repository.
"""

import logging
from typing import List, Optional, Union

from ...domain.entities.department import Department
from ...domain.entities.doctor import Doctor
from ...domain.entities.patient import Patient
from ...domain.enums.scheduling import Gender
from ...domain.errors import (
    DepartmentNotFoundError,
    DoctorNotFoundError,
    DuplicateDepartmentError,
    PatientNotFoundError,
)
from ...domain.value_objects.identifiers import DoctorId, PatientId
from ..ports.repositories.department_repo import DepartmentRepository
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.patient_repo import PatientRepository
from .identifier_issuer import IdentifierIssuer

logger = logging.getLogger("clinicslots")


class DirectoryService:
    """Registration and lookup of directory records."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        patient_repository: PatientRepository,
        department_repository: DepartmentRepository,
        issuer: IdentifierIssuer,
    ) -> None:
        self._doctors = doctor_repository
        self._patients = patient_repository
        self._departments = department_repository
        self._issuer = issuer

    # Doctors

    async def register_doctor(
        self,
        name: str,
        department_name: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> Doctor:
        """Create a doctor; joins ``department_name`` when that department exists."""
        doctor = Doctor(
            doctor_id=await self._issuer.issue_doctor_id(),
            name=name,
            department_name=department_name,
            specialty=specialty,
        )
        doctor = await self._doctors.save(doctor)
        if department_name and await self._departments.find_by_name(department_name) is not None:
            await self._departments.add_member(department_name, doctor.doctor_id)
        logger.info(f"Doctor registered: {doctor.doctor_id.value}")
        return doctor

    async def get_doctor(self, doctor_id: DoctorId) -> Doctor:
        doctor = await self._doctors.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id.value)
        return doctor

    async def update_doctor(
        self,
        doctor_id: DoctorId,
        name: Optional[str] = None,
        department_name: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> Doctor:
        doctor = await self.get_doctor(doctor_id)
        previous_department = doctor.department_name
        doctor.update_profile(name=name, department_name=department_name, specialty=specialty)
        doctor = await self._doctors.save(doctor)

        if department_name is not None and department_name != previous_department:
            if previous_department:
                await self._departments.remove_member(previous_department, doctor_id)
            if await self._departments.find_by_name(department_name) is not None:
                await self._departments.add_member(department_name, doctor_id)
        return doctor

    async def remove_doctor(self, doctor_id: DoctorId) -> None:
        doctor = await self.get_doctor(doctor_id)
        if doctor.department_name:
            await self._departments.remove_member(doctor.department_name, doctor_id)
        await self._doctors.delete(doctor_id)
        logger.info(f"Doctor removed: {doctor_id.value}")

    async def list_doctors(self, limit: int = 100, offset: int = 0) -> List[Doctor]:
        return await self._doctors.find_all(limit=limit, offset=offset)

    # Patients

    async def register_patient(
        self,
        name: str,
        identity_number: str,
        phone: str,
        gender: Optional[Union[Gender, str]] = None,
    ) -> Patient:
        patient = Patient(
            patient_id=await self._issuer.issue_patient_id(),
            name=name,
            identity_number=identity_number,
            phone=phone,
            gender=gender,
        )
        patient = await self._patients.save(patient)
        logger.info(f"Patient registered: {patient.patient_id.value}")
        return patient

    async def get_patient(self, patient_id: PatientId) -> Patient:
        patient = await self._patients.find_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id.value)
        return patient

    # Departments

    async def create_department(self, name: str) -> Department:
        department = Department(name=name)
        if await self._departments.find_by_name(department.name) is not None:
            raise DuplicateDepartmentError(department.name)
        return await self._departments.save(department)

    async def get_department(self, name: str) -> Department:
        department = await self._departments.find_by_name(name)
        if department is None:
            raise DepartmentNotFoundError(name)
        return department

    async def list_departments(self) -> List[Department]:
        return await self._departments.find_all()

    async def delete_department(self, name: str) -> None:
        if not await self._departments.delete(name):
            raise DepartmentNotFoundError(name)

    async def add_doctor_to_department(self, name: str, doctor_id: DoctorId) -> Doctor:
        """Put a doctor in a department, leaving any department they were in."""
        await self.get_department(name)
        doctor = await self.get_doctor(doctor_id)
        if doctor.department_name and doctor.department_name != name:
            await self._departments.remove_member(doctor.department_name, doctor_id)
        await self._departments.add_member(name, doctor_id)
        if doctor.department_name != name:
            doctor.update_profile(department_name=name)
            doctor = await self._doctors.save(doctor)
        return doctor

    async def remove_doctor_from_department(self, name: str, doctor_id: DoctorId) -> bool:
        """Returns False when the doctor was not a member."""
        await self.get_department(name)
        removed = await self._departments.remove_member(name, doctor_id)
        doctor = await self._doctors.find_by_id(doctor_id)
        if doctor is not None and doctor.department_name == name:
            doctor.department_name = None
            await self._doctors.save(doctor)
        return removed

    async def list_department_doctors(self, name: str) -> List[Doctor]:
        """Doctors of a department in the order they joined."""
        await self.get_department(name)
        doctors: List[Doctor] = []
        for doctor_id in await self._departments.list_members(name):
            doctor = await self._doctors.find_by_id(doctor_id)
            if doctor is not None:
                doctors.append(doctor)
        return doctors
