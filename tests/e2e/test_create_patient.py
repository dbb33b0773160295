"""
Patient creation form: happy path, required-field validation and cancel.
"""
import re

import pytest
from playwright.sync_api import Page, expect


@pytest.fixture
def patients_list(page: Page, rcm_config) -> Page:
    page.goto(rcm_config.url('patients'))
    page.wait_for_load_state('networkidle')
    return page


class TestCreatePatient:

    @pytest.mark.smoke
    @pytest.mark.critical
    def test_create_patient_with_valid_data(self, patients_list: Page, patient_data, rcm_config):
        page = patients_list
        page.get_by_role('button', name='New Patient').click()
        expect(page.get_by_role('heading', name='Create Patient')).to_be_visible()

        page.get_by_label('First Name').fill(patient_data['first_name'])
        page.get_by_label('Last Name').fill(patient_data['last_name'])
        page.get_by_label('Date of Birth').fill(patient_data['dob'])
        page.get_by_label('Gender').select_option(patient_data['gender'])
        page.get_by_label('SSN').fill(patient_data['ssn'])

        page.get_by_label('Email').fill(patient_data['email'])
        page.get_by_label('Phone').fill(patient_data['phone'])
        page.get_by_label('Address').fill(patient_data['address']['street'])
        page.get_by_label('City').fill(patient_data['address']['city'])
        page.get_by_label('State').select_option(patient_data['address']['state'])
        page.get_by_label('Zip Code').fill(patient_data['address']['zip'])

        page.get_by_role('button', name='Save').click()
        expect(page.get_by_text('Patient created successfully')).to_be_visible()

        page.goto(rcm_config.url('patients'))
        expect(page.get_by_text(f"{patient_data['last_name']}, {patient_data['first_name']}")).to_be_visible()

    @pytest.mark.regression
    def test_required_fields_are_validated(self, patients_list: Page):
        page = patients_list
        page.get_by_role('button', name='New Patient').click()
        page.get_by_role('button', name='Save').click()

        for field in ('First Name', 'Last Name', 'Date of Birth'):
            expect(page.get_by_text(re.compile(f'{field}.*required', re.IGNORECASE))).to_be_visible()

    @pytest.mark.regression
    def test_cancel_discards_changes(self, patients_list: Page):
        page = patients_list
        page.get_by_role('button', name='New Patient').click()
        page.get_by_label('First Name').fill('Test')
        page.get_by_label('Last Name').fill('User')

        page.get_by_role('button', name='Cancel').click()
        expect(page.get_by_role('heading', name='Patients')).to_be_visible()
