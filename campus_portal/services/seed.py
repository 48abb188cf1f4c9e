"""Default demo dataset for a fresh portal."""

import copy
from typing import Any, Dict, List

STUDENTS_KEY = "students"
INTERNSHIPS_KEY = "internships"
CRT_SESSIONS_KEY = "crtSessions"

COLLECTION_KEYS = (STUDENTS_KEY, INTERNSHIPS_KEY, CRT_SESSIONS_KEY)

DEFAULT_STUDENTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Arun Kumar",
        "registerNumber": "SVIT2023001",
        "branch": "Computer Science",
        "year": 3,
        "email": "arun.kumar@svit.edu.in",
        "phone": "9876543210",
        "internshipId": 1,
        "progress": [
            {"date": "2023-09-01", "task": "Requirements Analysis", "status": "Completed", "remarks": "Good work"},
            {"date": "2023-09-15", "task": "UI Design", "status": "In Progress", "remarks": "Needs improvement"},
        ],
    },
    {
        "id": 2,
        "name": "Priya Sharma",
        "registerNumber": "SVIT2023002",
        "branch": "Information Technology",
        "year": 3,
        "email": "priya.sharma@svit.edu.in",
        "phone": "9876543211",
        "internshipId": 2,
        "progress": [
            {"date": "2023-09-01", "task": "Database Design", "status": "Completed", "remarks": "Excellent work"},
        ],
    },
    {
        "id": 3,
        "name": "Rahul Verma",
        "registerNumber": "SVIT2023003",
        "branch": "Electronics",
        "year": 4,
        "email": "rahul.verma@svit.edu.in",
        "phone": "9876543212",
        "internshipId": 1,
        "progress": [],
    },
    {
        "id": 4,
        "name": "Sneha Patel",
        "registerNumber": "SVIT2023004",
        "branch": "Computer Science",
        "year": 3,
        "email": "sneha.patel@svit.edu.in",
        "phone": "9876543213",
        "internshipId": 3,
        "progress": [],
    },
    {
        "id": 5,
        "name": "Karthik Raja",
        "registerNumber": "SVIT2023005",
        "branch": "Mechanical",
        "year": 4,
        "email": "karthik.raja@svit.edu.in",
        "phone": "9876543214",
        "internshipId": None,
        "progress": [],
    },
]

DEFAULT_INTERNSHIPS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Web Application Development",
        "description": "Develop a full-stack web application using modern technologies.",
        "duration": "3 months",
        "startDate": "2023-09-01",
        "endDate": "2023-12-01",
        "maxStudents": 10,
        "guide": "Dr. Srinivas Reddy",
        "skills": ["JavaScript", "React", "Node.js", "MongoDB"],
        "status": "Active",
    },
    {
        "id": 2,
        "title": "Machine Learning Project",
        "description": "Implement machine learning algorithms for data analysis and prediction.",
        "duration": "4 months",
        "startDate": "2023-08-15",
        "endDate": "2023-12-15",
        "maxStudents": 8,
        "guide": "Dr. Anitha Krishnan",
        "skills": ["Python", "TensorFlow", "Data Analysis"],
        "status": "Active",
    },
    {
        "id": 3,
        "title": "Mobile App Development",
        "description": "Create a cross-platform mobile application using React Native.",
        "duration": "3 months",
        "startDate": "2023-09-15",
        "endDate": "2023-12-15",
        "maxStudents": 6,
        "guide": "Prof. Ramesh Kumar",
        "skills": ["React Native", "JavaScript", "Firebase"],
        "status": "Active",
    },
]

DEFAULT_CRT_SESSIONS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Resume Building Workshop",
        "description": "Learn how to craft an impressive resume for placement.",
        "date": "2023-09-10",
        "time": "10:00 AM - 12:00 PM",
        "venue": "Seminar Hall 1",
        "speaker": "Ms. Kavita Sharma",
        "eligibility": "All final year students",
        "registeredStudents": [1, 2, 5],
    },
    {
        "id": 2,
        "title": "Technical Interview Preparation",
        "description": "Practice common technical interview questions and algorithms.",
        "date": "2023-09-17",
        "time": "2:00 PM - 5:00 PM",
        "venue": "Computer Lab 3",
        "speaker": "Mr. Venkat Rao",
        "eligibility": "CS and IT final year students",
        "registeredStudents": [1, 3, 4],
    },
    {
        "id": 3,
        "title": "Group Discussion Skills",
        "description": "Enhance your group discussion skills for campus interviews.",
        "date": "2023-09-24",
        "time": "11:00 AM - 1:00 PM",
        "venue": "Seminar Hall 2",
        "speaker": "Dr. Rajesh Khanna",
        "eligibility": "All pre-final and final year students",
        "registeredStudents": [2, 3],
    },
]

# Passwords are hashed by campus_portal.core.security at import time
DEFAULT_USERS: List[Dict[str, Any]] = [
    {"id": 1, "username": "admin", "role": "admin", "full_name": "Admin User"},
    {"id": 2, "username": "faculty", "role": "faculty", "full_name": "Faculty Member"},
    {"id": 3, "username": "student", "role": "student", "full_name": "Student User", "student_id": 1},
]


def default_collections() -> Dict[str, List[Dict[str, Any]]]:
    """Return a fresh copy of the demo dataset keyed by storage key."""
    return {
        STUDENTS_KEY: copy.deepcopy(DEFAULT_STUDENTS),
        INTERNSHIPS_KEY: copy.deepcopy(DEFAULT_INTERNSHIPS),
        CRT_SESSIONS_KEY: copy.deepcopy(DEFAULT_CRT_SESSIONS),
    }
