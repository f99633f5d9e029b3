"""
Tests for the patient profile endpoints.
"""

def test_patient_reads_and_updates_profile(client, make_patient, auth_headers):
    patient = make_patient()
    headers = auth_headers(patient.user)

    response = client.get("/api/v1/patients/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["age"] == 30

    response = client.put(
        "/api/v1/patients/me",
        json={"address": "221B Baker Street", "allergies": "Penicillin", "contact": "555-0100"},
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "221B Baker Street"
    assert data["allergies"] == "Penicillin"
    assert data["user"]["contact"] == "555-0100"
    assert data["age"] == 30


def test_invalid_age_is_rejected(client, make_patient, auth_headers):
    headers = auth_headers(make_patient().user)
    response = client.put("/api/v1/patients/me", json={"age": -1}, headers=headers)
    assert response.status_code == 422


def test_doctor_cannot_use_patient_profile(client, make_doctor, auth_headers):
    headers = auth_headers(make_doctor().user)
    assert client.get("/api/v1/patients/me", headers=headers).status_code == 403
