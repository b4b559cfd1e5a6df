#!/usr/bin/env python3
"""
Live smoke test for a running clinic front-desk server.

Walks the main front-desk flow (register a patient with a first visit,
order and complete a lab test, nurse login) and reports every endpoint
that did not answer with the expected status.

    CLINIC_BASE_URL=http://127.0.0.1:8000 python scripts/smoke_api.py
"""
import os
import random
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

BASE_URL = os.getenv("CLINIC_BASE_URL", "http://127.0.0.1:8000").rstrip("/")

SMOKE_NURSE = {"nurse_id": "SMOKE01", "name": "Smoke Test", "password": "smoke-pass", "status": "Active"}


@dataclass
class TestResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""


class SmokeTester:
    def __init__(self):
        self.session = requests.Session()
        self.test_results = []
        self.error_results = []

    def call(self, method: str, endpoint: str, data: Optional[Dict] = None,
             expected_status: int = 200, description: str = "") -> Optional[Any]:
        """Call one endpoint, record the outcome and return the decoded body."""
        start_time = time.time()
        try:
            response = self.session.request(method, f"{BASE_URL}{endpoint}", json=data, timeout=10)
        except requests.RequestException as e:
            result = TestResult(False, endpoint, method, 0, time.time() - start_time, str(e), description)
            print(f"❌ {method} {endpoint} - exception: {e}")
            self._record(result)
            return None

        response_time = time.time() - start_time
        ok = response.status_code == expected_status
        result = TestResult(
            success=ok,
            endpoint=endpoint,
            method=method,
            status_code=response.status_code,
            response_time=response_time,
            error_message="" if ok else response.text[:200],
            description=description,
        )
        mark = "✅" if ok else "❌"
        print(f"{mark} {method} {endpoint} - {response.status_code} ({response_time:.2f}s)")
        self._record(result)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _record(self, result: TestResult):
        self.test_results.append(result)
        if not result.success:
            self.error_results.append(result)

    def run(self) -> bool:
        print("🏥 Clinic front-desk smoke test against", BASE_URL)
        print("=" * 50)

        self.call("GET", "/healthz", description="liveness")
        self.call("GET", "/api/test/health", description="service health")
        self.call("GET", "/api/test/db-connection", description="database reachability")

        aadhar = "".join(random.choice("0123456789") for _ in range(12))
        registration = self.call("POST", "/api/patients", {
            "patient": {
                "name": "Smoke", "surname": "Patient", "gender": "Other", "age": "30",
                "aadharNumber": aadhar,
            },
            "visit": {"bp": "120/80", "symptoms": "routine check"},
        }, 201, "register patient with first visit") or {}
        patient_id = registration.get("patientId")
        visit_id = registration.get("visitId")
        if registration.get("visitError"):
            print(f"⚠️  visit not created: {registration['visitError']}")

        self.call("POST", "/api/patients", {"name": "Dup", "surname": "Patient", "aadharNumber": aadhar},
                  409, "duplicate Aadhar is rejected")
        self.call("GET", f"/api/patients/check-aadhar/{aadhar}", description="Aadhar check")

        if patient_id:
            self.call("GET", f"/api/patients/{patient_id}", description="patient by code")
            self.call("GET", f"/api/visits/patient/{patient_id}/recent", description="recent visits")
            test = self.call("POST", f"/api/labtests/patient/{patient_id}", {"testName": "CBC"},
                             201, "order lab test") or {}
            if test.get("testId"):
                self.call("PATCH", f"/api/labtests/{test['testId']}/result", {"result": "normal"},
                          description="record lab result")
                self.call("DELETE", f"/api/labtests/{test['testId']}", expected_status=204,
                          description="delete lab test")
            if visit_id:
                self.call("GET", f"/api/labtests/visit/{visit_id}", description="lab tests for visit")
            self.call("DELETE", f"/api/patients/{patient_id}", expected_status=204,
                      description="delete smoke patient")

        self.call("POST", "/api/nurses", SMOKE_NURSE, 201, "create nurse")
        login = self.call("POST", "/api/auth/login",
                          {"nurse_id": SMOKE_NURSE["nurse_id"], "password": SMOKE_NURSE["password"]},
                          description="nurse login") or {}
        if not login.get("success"):
            print(f"⚠️  login did not succeed: {login.get('error')}")
        self.call("DELETE", f"/api/nurses/{SMOKE_NURSE['nurse_id']}", expected_status=204,
                  description="delete nurse")

        self.report()
        return not self.error_results

    def report(self):
        total_tests = len(self.test_results)
        successful_tests = total_tests - len(self.error_results)
        print("\n🎯 Summary:")
        print(f"  total:   {total_tests}")
        print(f"  passed:  {successful_tests}")
        print(f"  failed:  {len(self.error_results)}")
        for i, error in enumerate(self.error_results, 1):
            print(f"{i}. {error.method} {error.endpoint} ({error.description})")
            print(f"   status: {error.status_code}")
            print(f"   error:  {error.error_message}")


def main():
    tester = SmokeTester()
    sys.exit(0 if tester.run() else 1)


if __name__ == "__main__":
    main()
