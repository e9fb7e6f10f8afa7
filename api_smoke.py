#!/usr/bin/env python3
"""
Smoke test against a running server.

Logs in as each demo role (see ``manage.py ensure_test_users``), calls
the read endpoints every role should reach and reports failures.

    python api_smoke.py --base-url http://127.0.0.1:8000
"""
import argparse
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

import requests

DEFAULT_PASSWORD = "Health@2024"

USERS = {
    "admin": "admin1",
    "supervisor": "supervisor1",
    "doctor": "doctor1",
    "staff": "staff1",
}

# (path, roles allowed; None means every role)
ENDPOINTS = [
    ("/api/auth/profile", None),
    ("/api/auth/me", None),
    ("/api/facilities", None),
    ("/api/facilities/statistics", None),
    ("/api/facilities/map", None),
    ("/api/patients?limit=5", None),
    ("/api/patients/search?q=a", None),
    ("/api/users?status=pending", {"admin"}),
    ("/api/births", None),
    ("/api/births/statistics", None),
    ("/api/death-statistics", None),
    ("/api/death-statistics/summary", None),
    ("/api/antenatal", None),
    ("/api/antenatal/statistics", None),
    ("/api/immunizations", None),
    ("/api/immunizations/statistics", None),
    ("/api/immunizations/schedules", None),
    ("/api/immunizations/coverage", None),
    ("/api/immunizations/vaccine-types", None),
    ("/api/diseases", None),
    ("/api/diseases/cases", None),
    ("/api/diseases/statistics", None),
    ("/api/diseases/outbreaks", None),
    ("/api/family-planning/clients", None),
    ("/api/family-planning/methods", None),
    ("/api/family-planning/statistics", None),
    ("/api/locations/states", None),
    ("/api/locations/lgas?state=Akwa%20Ibom", None),
    ("/api/reports/general", None),
    ("/api/users", {"admin"}),
    ("/api/admin/audit-logs", {"admin", "supervisor"}),
]


@dataclass
class Result:
    role: str
    method: str
    path: str
    status: int
    expected: int
    elapsed: float
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == self.expected


class SmokeRunner:
    def __init__(self, base_url: str, password: str):
        self.base_url = base_url.rstrip("/")
        self.password = password
        self.session = requests.Session()
        self.results: List[Result] = []

    def _call(self, role, method, path, expected, token: Optional[str] = None, **kwargs) -> requests.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        started = time.time()
        try:
            resp = self.session.request(method, self.base_url + path, headers=headers, timeout=15, **kwargs)
        except requests.RequestException as exc:
            self.results.append(Result(role, method, path, 0, expected, time.time() - started, str(exc)))
            raise
        error = ""
        if resp.status_code != expected:
            try:
                error = resp.json().get("error", {}).get("message", "")
            except ValueError:
                error = resp.text[:200]
        self.results.append(Result(role, method, path, resp.status_code, expected, time.time() - started, error))
        return resp

    def login(self, role: str) -> Optional[str]:
        resp = self._call(role, "POST", "/api/auth/login", 200,
                          json={"username": USERS[role], "password": self.password})
        if resp.status_code != 200:
            return None
        return resp.json()["jwt_access"]

    def run(self) -> None:
        self._call("anonymous", "GET", "/healthz", 200)
        self._call("anonymous", "GET", "/api/patients", 401)
        self._call("anonymous", "GET", "/api/family-planning/services", 410)
        for role in USERS:
            token = self.login(role)
            if token is None:
                continue
            for path, allowed in ENDPOINTS:
                expected = 200 if allowed is None or role in allowed else 403
                self._call(role, "GET", path, expected, token=token)
            self._call(role, "GET", "/api/reports/export?module=facilities&format=csv", 200, token=token)

    def report(self) -> int:
        failures = [r for r in self.results if not r.ok]
        for r in self.results:
            mark = "ok  " if r.ok else "FAIL"
            print(f"{mark} {r.role:<10} {r.method:<4} {r.path:<55} {r.status} ({r.elapsed:.2f}s) {r.error}")
        print(f"\n{len(self.results) - len(failures)}/{len(self.results)} checks passed")
        return 1 if failures else 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    args = parser.parse_args()
    runner = SmokeRunner(args.base_url, args.password)
    try:
        runner.run()
    except requests.RequestException as exc:
        print(f"server unreachable: {exc}")
    return runner.report()


if __name__ == "__main__":
    sys.exit(main())
