"""
Directory endpoints for doctors, patients and departments.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...domain.value_objects.identifiers import DoctorId, PatientId
from ..deps import DirectoryServiceDep, QueryServiceDep
from ..schemas.common import ApiResponse
from ..schemas.directory import (
    CreateDepartmentRequest,
    DepartmentResponse,
    DoctorResponse,
    PatientResponse,
    RegisterDoctorRequest,
    RegisterPatientRequest,
    UpdateDoctorRequest,
)
from ..schemas.scheduling import ScheduleResponse
from ..utils.responses import ok

router = APIRouter(tags=["Directory"])


# Doctors


@router.post("/doctors", response_model=ApiResponse[DoctorResponse], status_code=status.HTTP_201_CREATED)
async def register_doctor(request: Request, payload: RegisterDoctorRequest, directory: DirectoryServiceDep):
    doctor = await directory.register_doctor(
        name=payload.name, department_name=payload.department_name, specialty=payload.specialty
    )
    return ok(request, data=DoctorResponse.from_domain(doctor), message="Doctor registered")


@router.get("/doctors", response_model=ApiResponse[List[DoctorResponse]])
async def list_doctors(
    request: Request,
    directory: DirectoryServiceDep,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    doctors = await directory.list_doctors(limit=limit, offset=offset)
    return ok(request, data=[DoctorResponse.from_domain(d) for d in doctors])


@router.get("/doctors/{doctor_id}", response_model=ApiResponse[DoctorResponse])
async def get_doctor(request: Request, doctor_id: str, directory: DirectoryServiceDep):
    doctor = await directory.get_doctor(DoctorId(doctor_id))
    return ok(request, data=DoctorResponse.from_domain(doctor))


@router.patch("/doctors/{doctor_id}", response_model=ApiResponse[DoctorResponse])
async def update_doctor(
    request: Request, doctor_id: str, payload: UpdateDoctorRequest, directory: DirectoryServiceDep
):
    doctor = await directory.update_doctor(
        DoctorId(doctor_id),
        name=payload.name,
        department_name=payload.department_name,
        specialty=payload.specialty,
    )
    return ok(request, data=DoctorResponse.from_domain(doctor), message="Doctor updated")


@router.delete("/doctors/{doctor_id}", response_model=ApiResponse[dict])
async def remove_doctor(request: Request, doctor_id: str, directory: DirectoryServiceDep):
    await directory.remove_doctor(DoctorId(doctor_id))
    return ok(request, data={"doctor_id": doctor_id}, message="Doctor removed")


# Patients


@router.post("/patients", response_model=ApiResponse[PatientResponse], status_code=status.HTTP_201_CREATED)
async def register_patient(request: Request, payload: RegisterPatientRequest, directory: DirectoryServiceDep):
    patient = await directory.register_patient(
        name=payload.name,
        identity_number=payload.identity_number,
        phone=payload.phone,
        gender=payload.gender,
    )
    return ok(request, data=PatientResponse.from_domain(patient), message="Patient registered")


@router.get("/patients/{patient_id}", response_model=ApiResponse[PatientResponse])
async def get_patient(request: Request, patient_id: str, directory: DirectoryServiceDep):
    patient = await directory.get_patient(PatientId(patient_id))
    return ok(request, data=PatientResponse.from_domain(patient))


# Departments


@router.post(
    "/departments", response_model=ApiResponse[DepartmentResponse], status_code=status.HTTP_201_CREATED
)
async def create_department(request: Request, payload: CreateDepartmentRequest, directory: DirectoryServiceDep):
    department = await directory.create_department(payload.name)
    return ok(request, data=DepartmentResponse.from_domain(department), message="Department created")


@router.get("/departments", response_model=ApiResponse[List[DepartmentResponse]])
async def list_departments(request: Request, directory: DirectoryServiceDep):
    departments = await directory.list_departments()
    return ok(request, data=[DepartmentResponse.from_domain(d) for d in departments])


@router.delete("/departments/{name}", response_model=ApiResponse[dict])
async def delete_department(request: Request, name: str, directory: DirectoryServiceDep):
    await directory.delete_department(name)
    return ok(request, data={"name": name}, message="Department deleted")


@router.get("/departments/{name}/doctors", response_model=ApiResponse[List[DoctorResponse]])
async def list_department_doctors(request: Request, name: str, directory: DirectoryServiceDep):
    doctors = await directory.list_department_doctors(name)
    return ok(request, data=[DoctorResponse.from_domain(d) for d in doctors])


@router.put("/departments/{name}/doctors/{doctor_id}", response_model=ApiResponse[DoctorResponse])
async def add_doctor_to_department(
    request: Request, name: str, doctor_id: str, directory: DirectoryServiceDep
):
    doctor = await directory.add_doctor_to_department(name, DoctorId(doctor_id))
    return ok(request, data=DoctorResponse.from_domain(doctor), message="Doctor added to department")


@router.delete("/departments/{name}/doctors/{doctor_id}", response_model=ApiResponse[dict])
async def remove_doctor_from_department(
    request: Request, name: str, doctor_id: str, directory: DirectoryServiceDep
):
    removed = await directory.remove_doctor_from_department(name, DoctorId(doctor_id))
    return ok(request, data={"removed": removed})


@router.get("/departments/{name}/free-slots", response_model=ApiResponse[List[ScheduleResponse]])
async def department_free_slots(
    request: Request,
    name: str,
    queries: QueryServiceDep,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
):
    """Free slots of every doctor in the department, in membership order."""
    slots = await queries.department_free_slots(name, start_date, end_date)
    return ok(request, data=[ScheduleResponse.from_domain(s) for s in slots])
