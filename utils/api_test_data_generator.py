"""
Test data for the REST API suites.

Every record that must be unique across parallel workers embeds
``generate_unique_id()``. ``generate_invalid_patient_data`` forces one field
to a known-bad value for negative tests.
"""

import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from faker import Faker

fake = Faker('en_US')

INVALID_PATIENT_FIELDS = ('firstName', 'lastName', 'dateOfBirth', 'gender', 'admissionDate', 'missingRequired')


def generate_unique_id(prefix: str = 'test') -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{fake.pystr(min_chars=6, max_chars=6)}"


def generate_patient_data(
    include_optional: bool = False,
    valid_format: bool = False,
    gender: Optional[str] = None
) -> Dict[str, Any]:
    """
    Generate unique patient data.

    Args:
        include_optional: Add middle name, MRN and SSN.
        valid_format: With include_optional, use realistic SSN/bed/physician values
            instead of the fixed test SSN.
        gender: 'M', 'F' or 'O'. Random M/F when omitted.
    """
    unique_id = generate_unique_id()
    gender = gender or fake.random_element(['M', 'F'])
    first_name = fake.first_name_female() if gender == 'F' else fake.first_name_male()

    data: Dict[str, Any] = {
        'firstName': first_name,
        'lastName': fake.last_name(),
        'dateOfBirth': fake.date_of_birth(minimum_age=18, maximum_age=90).isoformat(),
        'gender': gender,
        'admissionDate': fake.date_between(start_date='-30d', end_date='today').isoformat(),
    }

    if include_optional:
        data['middleName'] = fake.first_name()
        data['mrn'] = f"MRN{unique_id}"
        if valid_format:
            data['ssn'] = fake.numerify('###-##-####')
            data['bedId'] = fake.random_int(min=100, max=500)
            data['primaryPhysicianId'] = fake.random_int(min=1, max=100)
        else:
            data['ssn'] = '123-45-6789'

    return data


def generate_invalid_patient_data(invalid_field: str) -> Dict[str, Any]:
    """Patient data with one field forced invalid. Unknown field names raise ValueError."""
    data = generate_patient_data(include_optional=False)

    if invalid_field == 'firstName':
        return {**data, 'firstName': ''}
    if invalid_field == 'lastName':
        return {**data, 'lastName': ''}
    if invalid_field == 'dateOfBirth':
        return {**data, 'dateOfBirth': 'invalid-date'}
    if invalid_field == 'gender':
        return {**data, 'gender': 'X'}
    if invalid_field == 'admissionDate':
        return {**data, 'admissionDate': 'not-a-date'}
    if invalid_field == 'missingRequired':
        return {'firstName': data['firstName']}
    raise ValueError(f"Invalid field type: {invalid_field}")


def generate_contact_data(include_company: bool = False, include_address: bool = False) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        'firstName': fake.first_name(),
        'lastName': fake.last_name(),
        'phone': fake.phone_number(),
        'email': f"test-{generate_unique_id()}@example.com",
    }
    if include_company:
        data['companyName'] = fake.company()
    if include_address:
        data['address'] = {
            'street': fake.street_address(),
            'city': fake.city(),
            'state': fake.state_abbr(),
            'zipCode': fake.numerify('#####'),
        }
    return data


def generate_message_data(facility_id: int, recipient_ids: List[int]) -> Dict[str, Any]:
    return {
        'subject': f"Test Message - {generate_unique_id('msg')}",
        'body': fake.paragraph(),
        'expiresOn': fake.date_time_between(start_date='+1d', end_date='+1y').isoformat(),
        'isActive': True,
        'recipients': [{'recipientId': rid, 'recipientType': 'User'} for rid in recipient_ids],
        'facilityId': facility_id,
    }


def generate_appointment_data(facility_id: int, therapist_id: int, discipline: str) -> Dict[str, Any]:
    appointment_date = fake.date_between(start_date='today', end_date='+7d')
    hour = fake.random_int(min=8, max=16)
    return {
        'appointmentDate': appointment_date.isoformat(),
        'startTime': f"{hour:02d}:00",
        'endTime': f"{hour + 1:02d}:00",
        'discipline': discipline,
        'therapistId': therapist_id,
        'facilityId': facility_id,
        'notes': fake.sentence(),
    }


def generate_diagnosis_data() -> Dict[str, Any]:
    return {
        'diagnoses': [
            {
                'diagnosisCode': f"M{fake.numerify('####')}",
                'diagnosisType': 'ICD-10',
                'onsetDate': fake.date_between(start_date='-1y', end_date='today').isoformat(),
                'isPrimary': True,
            },
        ],
    }


def generate_discharge_data() -> Dict[str, Any]:
    return {
        'dischargeDate': fake.date_between(start_date='today', end_date='+30d').isoformat(),
        'dischargeReasonId': fake.random_int(min=1, max=10),
        'dischargeNotes': fake.sentence(),
    }


def generate_mrn() -> str:
    return f"MRN{fake.random_int(min=10000000, max=99999999)}"


def generate_test_ssn() -> str:
    """SSN in the 900-902 area range, which is never issued to real people."""
    area = fake.random_element(['900', '901', '902'])
    return f"{area}-{fake.numerify('##')}-{fake.numerify('####')}"


def generate_date_range(days_back: int = 30, days_forward: int = 7) -> Dict[str, str]:
    today = date.today()
    from_date = fake.date_between(start_date=today - timedelta(days=days_back), end_date=today)
    to_date = fake.date_between(start_date=today, end_date=today + timedelta(days=days_forward))
    return {'fromDate': from_date.isoformat(), 'toDate': to_date.isoformat()}


def format_time(minutes: int) -> str:
    """Minutes since midnight to HH:MM"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_time_slot() -> Dict[str, str]:
    hour = fake.random_int(min=8, max=16)
    duration = fake.random_element([30, 45, 60])
    start = hour * 60
    return {'startTime': format_time(start), 'endTime': format_time(start + duration)}


def generate_discipline() -> str:
    # Physical, Occupational, Speech, Respiratory therapy
    return fake.random_element(['PT', 'OT', 'ST', 'RT'])


def generate_credentials() -> str:
    return fake.random_element(['PT, DPT', 'OTR/L', 'SLP, CCC', 'RRT', 'MD', 'RN', 'LPN'])


def generate_organization_code() -> str:
    return fake.lexify('??????', letters='ABCDEFGHIJKLMNOPQRSTUVWXYZ')


def generate_facility_data() -> Dict[str, Any]:
    return {
        'facilityName': f"{fake.city()} Healthcare Center",
        'address': fake.street_address(),
        'city': fake.city(),
        'state': fake.state_abbr(),
        'zipCode': fake.numerify('#####'),
        'phone': fake.phone_number(),
        'isActive': True,
    }


def generate_username(domain: str = 'nethealth.com') -> str:
    return f"{fake.first_name().lower()}.{fake.last_name().lower()}{fake.numerify('###')}@{domain}"


def generate_auth_request(organization_code: str = 'TESTORG') -> Dict[str, str]:
    return {
        'username': generate_username(),
        'password': 'TestPassword123!',
        'organizationCode': organization_code,
    }
