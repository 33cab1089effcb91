"""
MongoDB implementations of the directory repositories.
"""

from datetime import datetime
from typing import List, Optional

from clinicslots.application.ports.repositories.department_repo import DepartmentRepository
from clinicslots.application.ports.repositories.doctor_repo import DoctorRepository
from clinicslots.application.ports.repositories.patient_repo import PatientRepository
from clinicslots.domain.entities.department import Department
from clinicslots.domain.entities.doctor import Doctor
from clinicslots.domain.entities.patient import Patient
from clinicslots.domain.value_objects.identifiers import DoctorId, PatientId

from ..models.directory_m import (
    DepartmentMembershipMongo,
    DepartmentMongo,
    DoctorMongo,
    PatientMongo,
)


class MongoDoctorRepository(DoctorRepository):
    """MongoDB implementation of DoctorRepository."""

    async def save(self, doctor: Doctor) -> Doctor:
        doctor_mongo = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor.doctor_id.value)
        if doctor_mongo:
            doctor_mongo.name = doctor.name
            doctor_mongo.department_name = doctor.department_name
            doctor_mongo.specialty = doctor.specialty
            doctor_mongo.updated_at = datetime.utcnow()
        else:
            doctor_mongo = DoctorMongo(
                doctor_id=doctor.doctor_id.value,
                name=doctor.name,
                department_name=doctor.department_name,
                specialty=doctor.specialty,
                created_at=doctor.created_at,
                updated_at=doctor.updated_at,
            )
        await doctor_mongo.save()
        return self._mongo_to_domain(doctor_mongo)

    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        doctor_mongo = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor_id.value)
        if not doctor_mongo:
            return None
        return self._mongo_to_domain(doctor_mongo)

    async def exists_by_id(self, doctor_id: DoctorId) -> bool:
        count = await DoctorMongo.find(DoctorMongo.doctor_id == doctor_id.value).count()
        return count > 0

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Doctor]:
        doctors_mongo = await DoctorMongo.find().sort("+doctor_id").skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(d) for d in doctors_mongo]

    async def delete(self, doctor_id: DoctorId) -> bool:
        doctor_mongo = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor_id.value)
        if not doctor_mongo:
            return False
        await doctor_mongo.delete()
        return True

    def _mongo_to_domain(self, doctor_mongo: DoctorMongo) -> Doctor:
        return Doctor(
            doctor_id=DoctorId(doctor_mongo.doctor_id),
            name=doctor_mongo.name,
            department_name=doctor_mongo.department_name,
            specialty=doctor_mongo.specialty,
            created_at=doctor_mongo.created_at,
            updated_at=doctor_mongo.updated_at,
        )


class MongoPatientRepository(PatientRepository):
    """MongoDB implementation of PatientRepository."""

    async def save(self, patient: Patient) -> Patient:
        patient_mongo = await PatientMongo.find_one(PatientMongo.patient_id == patient.patient_id.value)
        gender = patient.gender.value if patient.gender else None
        if patient_mongo:
            patient_mongo.name = patient.name
            patient_mongo.identity_number = patient.identity_number
            patient_mongo.phone = patient.phone
            patient_mongo.gender = gender
            patient_mongo.updated_at = datetime.utcnow()
        else:
            patient_mongo = PatientMongo(
                patient_id=patient.patient_id.value,
                name=patient.name,
                identity_number=patient.identity_number,
                phone=patient.phone,
                gender=gender,
                created_at=patient.created_at,
                updated_at=patient.updated_at,
            )
        await patient_mongo.save()
        return self._mongo_to_domain(patient_mongo)

    async def find_by_id(self, patient_id: PatientId) -> Optional[Patient]:
        patient_mongo = await PatientMongo.find_one(PatientMongo.patient_id == patient_id.value)
        if not patient_mongo:
            return None
        return self._mongo_to_domain(patient_mongo)

    async def exists_by_id(self, patient_id: PatientId) -> bool:
        count = await PatientMongo.find(PatientMongo.patient_id == patient_id.value).count()
        return count > 0

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Patient]:
        patients_mongo = await PatientMongo.find().sort("+patient_id").skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(p) for p in patients_mongo]

    async def delete(self, patient_id: PatientId) -> bool:
        patient_mongo = await PatientMongo.find_one(PatientMongo.patient_id == patient_id.value)
        if not patient_mongo:
            return False
        await patient_mongo.delete()
        return True

    def _mongo_to_domain(self, patient_mongo: PatientMongo) -> Patient:
        return Patient(
            patient_id=PatientId(patient_mongo.patient_id),
            name=patient_mongo.name,
            identity_number=patient_mongo.identity_number,
            phone=patient_mongo.phone,
            gender=patient_mongo.gender,
            created_at=patient_mongo.created_at,
            updated_at=patient_mongo.updated_at,
        )


class MongoDepartmentRepository(DepartmentRepository):
    """MongoDB implementation of DepartmentRepository; membership rows live in their own collection."""

    async def save(self, department: Department) -> Department:
        department_mongo = await DepartmentMongo.find_one(DepartmentMongo.name == department.name)
        if not department_mongo:
            department_mongo = DepartmentMongo(name=department.name, created_at=department.created_at)
            await department_mongo.save()
        return Department(name=department_mongo.name, created_at=department_mongo.created_at)

    async def find_by_name(self, name: str) -> Optional[Department]:
        department_mongo = await DepartmentMongo.find_one(DepartmentMongo.name == name)
        if not department_mongo:
            return None
        return Department(name=department_mongo.name, created_at=department_mongo.created_at)

    async def find_all(self) -> List[Department]:
        departments_mongo = await DepartmentMongo.find().sort("+name").to_list()
        return [Department(name=d.name, created_at=d.created_at) for d in departments_mongo]

    async def delete(self, name: str) -> bool:
        department_mongo = await DepartmentMongo.find_one(DepartmentMongo.name == name)
        if not department_mongo:
            return False
        await DepartmentMembershipMongo.find(DepartmentMembershipMongo.department_name == name).delete()
        await department_mongo.delete()
        return True

    async def add_member(self, name: str, doctor_id: DoctorId) -> bool:
        existing = await DepartmentMembershipMongo.find_one(
            DepartmentMembershipMongo.department_name == name,
            DepartmentMembershipMongo.doctor_id == doctor_id.value,
        )
        if existing:
            return False

        last = await DepartmentMembershipMongo.find(
            DepartmentMembershipMongo.department_name == name
        ).sort("-position").first_or_none()
        position = last.position + 1 if last else 0
        await DepartmentMembershipMongo(
            department_name=name, doctor_id=doctor_id.value, position=position
        ).save()
        return True

    async def remove_member(self, name: str, doctor_id: DoctorId) -> bool:
        existing = await DepartmentMembershipMongo.find_one(
            DepartmentMembershipMongo.department_name == name,
            DepartmentMembershipMongo.doctor_id == doctor_id.value,
        )
        if not existing:
            return False
        await existing.delete()
        return True

    async def list_members(self, name: str) -> List[DoctorId]:
        rows = await DepartmentMembershipMongo.find(
            DepartmentMembershipMongo.department_name == name
        ).sort("+position").to_list()
        return [DoctorId(row.doctor_id) for row in rows]
