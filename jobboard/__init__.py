"""
Job Board
A job board REST backend: admins, job providers and job seekers.

Architecture:
- MongoDB: users, jobs, applicants
- Local disk: uploaded resume PDFs
- services.integrity_service: cascades that keep the three collections consistent
"""

__version__ = "1.0.0"
