from frontdesk.models import Patient

_aadhar_seq = iter(range(100000000000, 999999999999))


def next_aadhar() -> str:
    return str(next(_aadhar_seq))


def patient_payload(**overrides) -> dict:
    data = {
        'name': 'Asha',
        'surname': 'Verma',
        'fatherName': 'Mohan',
        'gender': 'Female',
        'age': 34,
        'address': '12 MG Road, Pune',
        'bloodGroup': 'B+',
        'phoneNumber': '9822001122',
        'aadharNumber': next_aadhar(),
    }
    data.update(overrides)
    return data


def make_patient(patient_id: str = '001', **fields) -> Patient:
    defaults = {
        'name': 'Ravi',
        'surname': 'Kumar',
        'age': 40,
        'aadhar_number': next_aadhar(),
    }
    defaults.update(fields)
    return Patient.objects.create(patient_id=patient_id, **defaults)
