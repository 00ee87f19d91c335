"""Built-in starter templates offered to new users."""
from typing import Any, Dict, List, Optional

from app.layout import rows_from_fields
from app.schemas import FormDefinition, FormSettings, FormTemplateIn

_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "invoice",
        "name": "Professional Invoice",
        "category": "Business",
        "description": "Create professional invoices for your freelance work",
        "settings": {"title": "Invoice", "showPageNumbers": True},
        "fields": [
            {"id": "invoice_number", "type": "text", "label": "Invoice Number", "required": True,
             "placeholder": "INV-001", "columns": 3},
            {"id": "invoice_date", "type": "date", "label": "Invoice Date", "required": True, "columns": 3},
            {"id": "due_date", "type": "date", "label": "Due Date", "required": True, "columns": 3},
            {"id": "billing_heading", "type": "heading2", "content": "Bill To"},
            {"id": "client_name", "type": "text", "label": "Client Name", "required": True,
             "placeholder": "Acme Corporation", "columns": 2},
            {"id": "client_email", "type": "email", "label": "Client Email", "required": True,
             "placeholder": "client@company.com", "columns": 2},
            {"id": "client_address", "type": "textarea", "label": "Client Address"},
            {"id": "your_name", "type": "text", "label": "Your Name/Business", "required": True},
            {"id": "your_address", "type": "textarea", "label": "Your Address"},
            {"id": "services_divider", "type": "divider"},
            {"id": "service_description", "type": "textarea", "label": "Service Description", "required": True},
            {"id": "hours_worked", "type": "number", "label": "Hours Worked", "placeholder": "40", "columns": 3},
            {"id": "hourly_rate", "type": "number", "label": "Hourly Rate ($)", "placeholder": "75", "columns": 3},
            {"id": "total_amount", "type": "number", "label": "Total Amount ($)", "required": True, "columns": 3},
            {"id": "payment_terms", "type": "select", "label": "Payment Terms", "required": True,
             "options": ["Net 30 days", "Net 15 days", "Due on receipt", "Net 60 days"]},
            {"id": "payment_methods", "type": "textarea", "label": "Payment Methods",
             "placeholder": "Bank transfer, PayPal, Check"},
            {"id": "notes", "type": "textarea", "label": "Additional Notes"},
        ],
    },
    {
        "id": "freelance-contract",
        "name": "Freelance Service Agreement",
        "category": "Legal",
        "description": "Professional freelance contract template",
        "settings": {"title": "Freelance Service Agreement"},
        "fields": [
            {"id": "contract_date", "type": "date", "label": "Contract Date", "required": True},
            {"id": "parties_heading", "type": "heading2", "content": "Parties"},
            {"id": "client_name", "type": "text", "label": "Client Name", "required": True,
             "placeholder": "ABC Company Inc.", "columns": 2},
            {"id": "freelancer_name", "type": "text", "label": "Freelancer Name", "required": True,
             "placeholder": "John Doe", "columns": 2},
            {"id": "client_address", "type": "textarea", "label": "Client Address", "required": True,
             "columns": 2},
            {"id": "freelancer_address", "type": "textarea", "label": "Freelancer Address", "required": True,
             "columns": 2},
            {"id": "project_heading", "type": "heading2", "content": "Project"},
            {"id": "project_description", "type": "textarea", "label": "Project Description", "required": True,
             "placeholder": "Detailed description of work to be performed..."},
            {"id": "project_timeline", "type": "text", "label": "Project Timeline", "required": True,
             "placeholder": "30 days from contract signing"},
            {"id": "deliverables", "type": "textarea", "label": "Deliverables", "required": True},
            {"id": "revision_rounds", "type": "number", "label": "Included Revision Rounds", "required": True,
             "placeholder": "3"},
            {"id": "terms_divider", "type": "divider"},
            {"id": "total_compensation", "type": "number", "label": "Total Compensation ($)", "required": True,
             "placeholder": "5000", "columns": 2},
            {"id": "payment_schedule", "type": "select", "label": "Payment Schedule", "required": True,
             "options": ["50% upfront, 50% on completion", "25% upfront, 75% on completion",
                         "Full payment upfront", "Payment on completion", "Monthly installments"],
             "columns": 2},
            {"id": "intellectual_property", "type": "select", "label": "Intellectual Property Rights",
             "required": True,
             "options": ["Client owns all rights", "Freelancer retains rights", "Shared ownership",
                         "License to use"]},
            {"id": "confidentiality", "type": "checkbox", "label": "Include Confidentiality Clause"},
            {"id": "termination_clause", "type": "textarea", "label": "Termination Terms", "required": True,
             "placeholder": "Either party may terminate with 7 days written notice..."},
        ],
    },
    {
        "id": "medical-intake",
        "name": "Medical Intake Form",
        "category": "Medical",
        "description": "Comprehensive patient intake form for medical practices",
        "settings": {"title": "Patient Intake", "subtitle": "Please complete all required fields"},
        "fields": [
            {"id": "patient_name", "type": "text", "label": "Patient Full Name", "required": True, "columns": 2},
            {"id": "date_of_birth", "type": "date", "label": "Date of Birth", "required": True, "columns": 2},
            {"id": "gender", "type": "select", "label": "Gender",
             "options": ["Male", "Female", "Other", "Prefer not to say"]},
            {"id": "phone", "type": "tel", "label": "Phone Number", "required": True, "columns": 2},
            {"id": "email", "type": "email", "label": "Email Address", "columns": 2},
            {"id": "history_heading", "type": "heading2", "content": "Medical History"},
            {"id": "chief_complaint", "type": "textarea", "label": "Chief Complaint / Reason for Visit",
             "required": True},
            {"id": "has_allergies", "type": "checkbox", "label": "I have known allergies"},
            {"id": "allergies", "type": "textarea", "label": "Allergies (Drug, Food, Environmental)",
             "required": True,
             "conditions": [{"action": "hide", "logic": "all",
                             "rules": [{"fieldId": "has_allergies", "operator": "equals", "value": "unchecked"}]}]},
            {"id": "smoking_status", "type": "select", "label": "Smoking Status",
             "options": ["Never smoked", "Former smoker", "Current smoker"]},
            {"id": "cigarettes_per_day", "type": "number", "label": "Cigarettes per Day",
             "conditions": [{"action": "hide", "logic": "all",
                             "rules": [{"fieldId": "smoking_status", "operator": "not_equals",
                                        "value": "Current smoker"}]}]},
            {"id": "consent_divider", "type": "divider"},
            {"id": "consent_treatment", "type": "checkbox",
             "label": "I consent to medical treatment and examination", "required": True},
            {"id": "patient_signature", "type": "signature", "label": "Patient Signature", "required": True},
        ],
    },
    {
        "id": "rental-agreement",
        "name": "Residential Rental Agreement",
        "category": "Real Estate",
        "description": "Professional rental lease agreement for landlords and property managers",
        "settings": {"title": "Residential Lease Agreement"},
        "fields": [
            {"id": "lease_date", "type": "date", "label": "Lease Agreement Date", "required": True},
            {"id": "landlord_name", "type": "text", "label": "Landlord/Owner Name", "required": True,
             "placeholder": "Property Management LLC", "columns": 2},
            {"id": "tenant_name", "type": "text", "label": "Tenant Name(s)", "required": True,
             "placeholder": "John Doe, Jane Doe", "columns": 2},
            {"id": "landlord_address", "type": "textarea", "label": "Landlord Address", "required": True},
            {"id": "property_address", "type": "textarea", "label": "Rental Property Address", "required": True},
            {"id": "term_heading", "type": "heading2", "content": "Lease Term and Payment"},
            {"id": "lease_term", "type": "select", "label": "Lease Term", "required": True,
             "options": ["6 months", "12 months", "18 months", "24 months", "Month-to-month", "Other"],
             "columns": 3},
            {"id": "lease_start_date", "type": "date", "label": "Lease Start Date", "required": True, "columns": 3},
            {"id": "lease_end_date", "type": "date", "label": "Lease End Date", "required": True, "columns": 3},
            {"id": "monthly_rent", "type": "number", "label": "Monthly Rent Amount ($)", "required": True,
             "placeholder": "1500", "columns": 2},
            {"id": "security_deposit", "type": "number", "label": "Security Deposit ($)", "required": True,
             "placeholder": "1500", "columns": 2},
            {"id": "rules_heading", "type": "heading2", "content": "Property Rules"},
            {"id": "pet_policy", "type": "select", "label": "Pet Policy", "required": True,
             "options": ["No pets allowed", "Cats allowed", "Dogs allowed", "Cats and dogs allowed",
                         "All pets allowed with approval"]},
            {"id": "pet_deposit", "type": "number", "label": "Pet Deposit ($)", "placeholder": "500",
             "conditions": [{"action": "hide", "logic": "any",
                             "rules": [{"fieldId": "pet_policy", "operator": "equals", "value": "No pets allowed"},
                                       {"fieldId": "pet_policy", "operator": "equals", "value": ""}]}]},
            {"id": "smoking_policy", "type": "select", "label": "Smoking Policy", "required": True,
             "options": ["No smoking anywhere on property", "Smoking allowed outdoors only", "Smoking allowed"]},
            {"id": "utilities_included", "type": "textarea", "label": "Utilities Included in Rent",
             "placeholder": "Water, sewer, trash (tenant pays electric, gas, internet)"},
            {"id": "parking_spaces", "type": "number", "label": "Number of Parking Spaces", "placeholder": "2"},
            {"id": "maintenance_responsibility", "type": "textarea", "label": "Maintenance Responsibilities",
             "required": True},
            {"id": "renewal_terms", "type": "textarea", "label": "Lease Renewal Terms"},
            {"id": "additional_terms", "type": "textarea", "label": "Additional Terms and Conditions"},
            {"id": "signatures_divider", "type": "divider"},
            {"id": "landlord_signature", "type": "signature", "label": "Landlord Signature", "required": True,
             "columns": 2},
            {"id": "tenant_signature", "type": "signature", "label": "Tenant Signature", "required": True,
             "columns": 2},
        ],
    },
    {
        "id": "nda-agreement",
        "name": "Non-Disclosure Agreement (NDA)",
        "category": "Legal",
        "description": "Professional NDA for protecting confidential business information",
        "settings": {"title": "Non-Disclosure Agreement"},
        "fields": [
            {"id": "agreement_date", "type": "date", "label": "Agreement Date", "required": True},
            {"id": "disclosing_party", "type": "text", "label": "Disclosing Party (Company Name)",
             "required": True, "columns": 2},
            {"id": "receiving_party", "type": "text", "label": "Receiving Party (Name/Company)",
             "required": True, "columns": 2},
            {"id": "purpose", "type": "textarea", "label": "Purpose of Disclosure", "required": True},
            {"id": "agreement_type", "type": "radio", "label": "Agreement Type", "required": True,
             "options": ["Mutual", "One-way"]},
            {"id": "term_intro", "type": "paragraph",
             "content": "The obligations of confidentiality survive for the term stated below, "
                        "starting on the agreement date."},
            {"id": "term_years", "type": "number", "label": "Term (years)", "required": True},
            {"id": "disclosing_signature", "type": "signature", "label": "Disclosing Party Signature",
             "required": True, "columns": 2},
            {"id": "receiving_signature", "type": "signature", "label": "Receiving Party Signature",
             "required": True, "columns": 2},
        ],
    },
]


def _build(template: Dict[str, Any]) -> FormTemplateIn:
    definition = FormDefinition(
        rows=rows_from_fields(template["fields"]),
        settings=FormSettings(**template.get("settings", {})),
    )
    return FormTemplateIn(
        id=template["id"],
        name=template["name"],
        category=template["category"],
        description=template["description"],
        definition=definition,
    )


def builtin_templates() -> List[FormTemplateIn]:
    # built fresh on each call so callers may edit the result
    return [_build(template) for template in _TEMPLATES]


def get_builtin_template(template_id: str) -> Optional[FormTemplateIn]:
    for template in _TEMPLATES:
        if template["id"] == template_id:
            return _build(template)
    return None
