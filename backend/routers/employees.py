import datetime as dt
from contextlib import closing
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from db import get_db
from queries.employees import delete_employee, fetch_employee, fetch_employees, insert_employee
from analytics.birthdays import (
    birthday_email_content,
    calendar_links,
    format_birthday_info,
    today_birthdays,
    upcoming_birthdays,
)

router = APIRouter()


class EmployeeCreate(BaseModel):
    full_name:  str
    position:   str                = ""
    birth_date: Optional[dt.date]  = None
    email:      Optional[str]      = None
    department: Optional[str]      = None


@router.get("/api/employees")
def list_employees():
    with closing(get_db()) as conn:
        result = fetch_employees(conn)
    return {"employees": result}


@router.post("/api/employees", status_code=201)
def create_employee(req: EmployeeCreate):
    fields = req.model_dump()
    if req.birth_date:
        fields["birth_date"] = req.birth_date.isoformat()
    with closing(get_db()) as conn:
        result = insert_employee(conn, fields)
    return result


@router.get("/api/employees/birthdays")
def birthdays(days: int = Query(30, ge=0, le=366), today: Optional[dt.date] = None):
    today = today or dt.date.today()
    with closing(get_db()) as conn:
        employees = fetch_employees(conn)
    return {
        "today":    [e["id"] for e in today_birthdays(employees, today)],
        "upcoming": [
            {**e, "info": format_birthday_info(e, today)}
            for e in upcoming_birthdays(employees, today, days)
        ],
        "email_body": birthday_email_content(employees, today),
    }


@router.get("/api/employees/{employee_id}")
def get_employee(employee_id: str):
    with closing(get_db()) as conn:
        result = fetch_employee(conn, employee_id)
    return result


@router.delete("/api/employees/{employee_id}")
def remove_employee(employee_id: str):
    with closing(get_db()) as conn:
        delete_employee(conn, employee_id)
    return {"ok": True}


@router.get("/api/employees/{employee_id}/calendar")
def employee_calendar(employee_id: str, year: Optional[int] = None):
    with closing(get_db()) as conn:
        employee = fetch_employee(conn, employee_id)
    try:
        return calendar_links(employee, year or dt.date.today().year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
