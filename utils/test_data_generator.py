"""
Randomised UI test data (patients, billing, claims, appointments, insurance).
"""

import time
from typing import Any, Dict, Optional

from faker import Faker

fake = Faker('en_US')

ALPHANUMERIC = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'


def seed(value: Optional[int]):
    """Make generated data reproducible across runs."""
    Faker.seed(value)


class TestDataGenerator:
    """Factories for the records the RCM UI tests type into forms."""

    __test__ = False  # not a pytest test class

    @staticmethod
    def generate_patient() -> Dict[str, Any]:
        return {
            'mrn': f"MRN-{fake.numerify('######')}",
            'first_name': fake.first_name(),
            'last_name': fake.last_name(),
            'dob': fake.date_of_birth(minimum_age=18, maximum_age=90).isoformat(),
            'gender': fake.random_element(['Male', 'Female', 'Other']),
            'ssn': fake.numerify('#########'),
            'phone': fake.phone_number(),
            'email': fake.email(),
            'address': {
                'street': fake.street_address(),
                'city': fake.city(),
                'state': fake.state_abbr(),
                'zip': fake.numerify('#####'),
            },
        }

    @staticmethod
    def generate_billing_data() -> Dict[str, Any]:
        return {
            'invoice_number': f"INV-{fake.numerify('########')}",
            'amount': float(fake.pydecimal(min_value=100, max_value=5000, right_digits=2)),
            'date': fake.date_between(start_date='-1d', end_date='today').isoformat(),
            'payment_method': fake.random_element(['Credit Card', 'Insurance', 'Cash', 'Check']),
            'status': fake.random_element(['Pending', 'Paid', 'Overdue', 'Cancelled']),
        }

    @staticmethod
    def generate_claim() -> Dict[str, Any]:
        return {
            'claim_id': f"CLM-{fake.numerify('##########')}",
            'patient_id': fake.numerify('######'),
            'service_date': fake.date_between(start_date='-30d', end_date='today').isoformat(),
            'diagnosis_code': fake.random_element(['M54.5', 'E11.9', 'I10', 'J44.9']),
            'procedure_code': fake.random_element(['99213', '99214', '99215', '99203']),
            'amount': float(fake.pydecimal(min_value=200, max_value=2000, right_digits=2)),
            'status': fake.random_element(['Submitted', 'In Review', 'Approved', 'Denied']),
        }

    @staticmethod
    def generate_appointment() -> Dict[str, Any]:
        when = fake.date_time_between(start_date='+1d', end_date='+1y')
        return {
            'type': fake.random_element(['Follow-up', 'New Patient', 'Consultation', 'Procedure']),
            'date': when.date().isoformat(),
            'time': when.strftime('%H:%M'),
            'duration': fake.random_element([15, 30, 45, 60]),
            'location': fake.random_element(['Main Clinic', 'Outpatient Center', 'Specialty Clinic']),
            'provider': f"Dr. {fake.name()}",
        }

    @staticmethod
    def generate_unique_id(prefix: str = 'TEST') -> str:
        return f"{prefix}-{int(time.time() * 1000)}-{fake.lexify('??????', letters=ALPHANUMERIC)}"

    @staticmethod
    def generate_insurance() -> Dict[str, Any]:
        return {
            'provider': fake.random_element(['Blue Cross', 'Aetna', 'United Healthcare', 'Cigna', 'Medicare']),
            'policy_number': fake.lexify('?' * 12, letters=ALPHANUMERIC),
            'group_number': fake.lexify('?' * 8, letters=ALPHANUMERIC),
            'subscriber_id': fake.numerify('#########'),
            'effective_date': (fake.date_between(start_date='-1y', end_date='-1d')).isoformat(),
        }
