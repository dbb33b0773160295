"""RCM Direct Billing screens: patients, revenue, claims."""

from pages.rcm.claims_page import ClaimsPage
from pages.rcm.patient_search_page import PatientSearchPage
from pages.rcm.revenue_page import RevenuePage

__all__ = ['ClaimsPage', 'PatientSearchPage', 'RevenuePage']
