"""
Data Loader Script - Seeds sample students and attendance through the API.

Creates a handful of students, records a few weeks of attendance and a
rating for each, then prints every student's attendance summary as the
stats endpoint reports it.

Usage:
    python load_data.py                              # Uses default URL
    python load_data.py http://localhost:8000         # Custom API URL
    python load_data.py http://backend:8000           # Inside Docker network
"""

import sys
import os

import httpx

SAMPLE_STUDENTS = [
    {"name": "Aarav Sharma", "email": "aarav.sharma@example.com", "phone": "9800000001"},
    {"name": "Meera Nair", "email": "meera.nair@example.com", "phone": "9800000002"},
    {"name": "Kabir Singh", "email": "kabir.singh@example.com", "phone": "9800000003"},
    {"name": "Diya Menon", "email": "diya.menon@example.com", "phone": "9800000004"},
]

# (day, week) pairs for the first two school weeks of each seeded month
SCHOOL_DAYS = [(1, 1), (2, 1), (3, 1), (8, 2), (9, 2), (10, 2)]
SEEDED_MONTHS = (1, 2)


def was_present(student_index, day, month):
    # deterministic spread of absences so the stats differ per student
    return (student_index + day + month) % 4 != 0


def create_student(client, api_url, student):
    resp = client.post(f"{api_url}/api/students", data=student)
    if resp.status_code == 400:
        print(f"  ⏭  {student['name']}: {resp.json().get('error')}")
        return None
    resp.raise_for_status()
    return resp.json()["data"]


def main():
    # Determine API base URL
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:8000")
    api_url = api_url.rstrip("/")

    print(f"Seeding {len(SAMPLE_STUDENTS)} students into: {api_url}")
    print()

    created = []
    with httpx.Client(timeout=30.0) as client:
        for index, sample in enumerate(SAMPLE_STUDENTS):
            student = create_student(client, api_url, sample)
            if student is None:
                continue
            created.append(student)

            for month in SEEDED_MONTHS:
                for day, week in SCHOOL_DAYS:
                    resp = client.post(
                        f"{api_url}/api/students/{student['id']}/attendance",
                        json={"day": day, "week": week + 4 * (month - 1), "month": month,
                              "status": was_present(index, day, month)},
                    )
                    resp.raise_for_status()

            resp = client.post(
                f"{api_url}/api/students/{student['id']}/ratings",
                json={"week": 1, "day": 1, "assignments": 70 + index * 5,
                      "participation": 80, "performance": 65 + index * 7},
            )
            resp.raise_for_status()
            print(f"  ✅ {student['name']} ({student['student_code']})")

        # Display results
        print()
        print("=" * 60)
        print("ATTENDANCE SUMMARY")
        print("=" * 60)
        for student in created:
            resp = client.get(f"{api_url}/api/students/{student['id']}/attendance/stats")
            resp.raise_for_status()
            overall = resp.json()["data"]["overall"]
            print(f"  {student['name']:<20} "
                  f"{overall['presentRecords']}/{overall['totalRecords']} present "
                  f"({overall['attendancePercentage']}%)")
        print("=" * 60)

    print()
    print(f"✅ Data loading complete! Browse {api_url}/docs to explore the API.")


if __name__ == "__main__":
    main()
