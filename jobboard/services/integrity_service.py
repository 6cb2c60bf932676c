"""
Integrity Service - cascades and uniqueness rules across users, jobs and applicants.

Every operation that creates or deletes a user, job or applicant goes through
here so the cross-collection rules hold:

- Deleting a user removes the jobs they posted, every applicant on those jobs,
  every application they made, and the resume files of those applicants.
- Deleting a job removes its applicants (and resumes) and pulls the job id
  from its owner's `jobsPosted`.
- A seeker applies at most once per job (unique index on userId + jobId).
- A resume file is deleted only after its applicant record is gone, or when
  the upload is turned down before any record is written.

MongoDB here runs without multi-document transactions, so each cascade is a
sequence of single-collection calls: children first, parent last. A crash in
the middle can leave a stray resume file or a job missing from `jobsPosted`,
never an applicant pointing at a deleted job or user.

Expected outcomes (not found, forbidden, conflicts) come back as an
OperationResult. Storage errors (PyMongoError) propagate to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from jobboard.core.config import get_settings
from jobboard.schemas.schemas import APPLIED_STATUS_PREFIX, SHORTLISTED_STATUS
from jobboard.services.mongo_service import (
    UserService,
    JobService,
    ApplicantService,
    to_object_id,
)
from jobboard.utils.file_upload import clear_resume

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    success = "success"
    not_found = "not_found"
    forbidden = "forbidden"
    duplicate_application = "duplicate_application"
    already_shortlisted = "already_shortlisted"


@dataclass
class OperationResult:
    outcome: Outcome
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.success


def format_applied_date(when: Optional[datetime] = None) -> str:
    """Human-readable date used in the "Applied on <date>" status."""
    when = when or datetime.now()
    return when.strftime(get_settings().applied_date_format)


class IntegrityService:
    """
    Coordinates deletes and creates that touch more than one collection.
    Instantiate per request (collections are resolved at construction).
    """

    def __init__(self):
        self.users = UserService()
        self.jobs = JobService()
        self.applicants = ApplicantService()

    # --------------------------------------------------------
    # helpers
    # --------------------------------------------------------

    def _remove_applicants(self, filter: Dict[str, Any]) -> int:
        """Delete matching applicant records, then their resume files."""
        applicants = self.applicants.find(filter)
        if not applicants:
            return 0

        deleted = self.applicants.delete_many(
            {"_id": {"$in": [a["_id"] for a in applicants]}}
        )
        for applicant in applicants:
            clear_resume(applicant.get("resume"))
        return deleted

    # --------------------------------------------------------
    # users
    # --------------------------------------------------------

    def delete_user(self, target_id: Any, requester_id: Any) -> OperationResult:
        user_oid = to_object_id(target_id)
        if user_oid is not None and user_oid == to_object_id(requester_id):
            return OperationResult(Outcome.forbidden, "Cannot delete the current User")

        user = self.users.find_by_id(user_oid) if user_oid else None
        if not user:
            return OperationResult(Outcome.not_found, "Cannot delete user. User not found!")

        # jobsPosted can drift from jobs.providerId; take both
        job_ids = set(user.get("jobsPosted") or [])
        job_ids.update(job["_id"] for job in self.jobs.find({"providerId": user_oid}))

        clauses = [{"userId": user_oid}, {"providerId": user_oid}]
        if job_ids:
            clauses.append({"jobId": {"$in": list(job_ids)}})
        removed_applicants = self._remove_applicants({"$or": clauses})

        removed_jobs = 0
        if job_ids:
            removed_jobs = self.jobs.delete_many({"_id": {"$in": list(job_ids)}})

        self.users.delete_by_id(user_oid)

        logger.info(
            "Deleted user %s (%s): %d jobs, %d applicants removed",
            user_oid, user.get("role"), removed_jobs, removed_applicants
        )
        return OperationResult(
            Outcome.success,
            "User record was deleted successfully!",
            {"jobsDeleted": removed_jobs, "applicantsDeleted": removed_applicants},
        )

    # --------------------------------------------------------
    # jobs
    # --------------------------------------------------------

    def add_job(self, fields: Dict[str, Any], owner_id: Any) -> OperationResult:
        """Insert a job owned by `owner_id` and record it in the owner's jobsPosted."""
        owner_oid = to_object_id(owner_id)
        job_id = self.jobs.insert({**fields, "providerId": owner_oid})
        self.users.push_job(owner_oid, job_id)

        logger.info("User %s posted job %s", owner_oid, job_id)
        return OperationResult(Outcome.success, "Job Added Successfully", {"jobId": str(job_id)})

    def delete_job(self, job_id: Any, requester_id: Any, require_ownership: bool) -> OperationResult:
        job_oid = to_object_id(job_id)
        job = None
        if job_oid:
            if require_ownership:
                job = self.jobs.get_owned(job_oid, to_object_id(requester_id))
            else:
                job = self.jobs.find_by_id(job_oid)
        if not job:
            return OperationResult(Outcome.not_found, "Cannot delete job. Job not found!")

        removed_applicants = self._remove_applicants({"jobId": job_oid})
        self.users.pull_job(job["providerId"], job_oid)
        self.jobs.delete_by_id(job_oid)

        logger.info("Deleted job %s: %d applicants removed", job_oid, removed_applicants)
        return OperationResult(
            Outcome.success,
            "Job record was deleted successfully!",
            {"applicantsDeleted": removed_applicants},
        )

    # --------------------------------------------------------
    # applicants
    # --------------------------------------------------------

    def apply_to_job(
        self,
        job_id: Any,
        seeker_id: Any,
        provider_id: Any,
        resume_path: str,
    ) -> OperationResult:
        """
        Record a seeker's application. `resume_path` is already on disk;
        it is deleted on every path that does not create the applicant.
        """
        job_oid = to_object_id(job_id)
        job = self.jobs.find_by_id(job_oid) if job_oid else None
        if not job:
            clear_resume(resume_path)
            return OperationResult(Outcome.not_found, "Job not found")

        owner_oid: ObjectId = job["providerId"]
        if provider_id and to_object_id(provider_id) != owner_oid:
            clear_resume(resume_path)
            logger.warning(
                "Rejected application to job %s: providerId %s does not own it",
                job_oid, provider_id
            )
            return OperationResult(Outcome.forbidden, "Provider does not match the job's owner")

        seeker_oid = to_object_id(seeker_id)
        duplicate = OperationResult(
            Outcome.duplicate_application, "You have already applied for the job!"
        )
        if self.applicants.get_for_pair(seeker_oid, job_oid):
            clear_resume(resume_path)
            return duplicate

        try:
            applicant_id = self.applicants.insert({
                "jobId": job_oid,
                "userId": seeker_oid,
                "providerId": owner_oid,
                "resume": resume_path,
                "status": APPLIED_STATUS_PREFIX + format_applied_date(),
            })
        except DuplicateKeyError:
            # lost the race against a concurrent application
            clear_resume(resume_path)
            return duplicate

        return OperationResult(
            Outcome.success,
            "Successfully applied for the job!",
            {"applicantId": str(applicant_id)},
        )

    def _owned_applicant(self, applicant_id: Any, provider_id: Any, not_found_message: str):
        applicant_oid = to_object_id(applicant_id)
        applicant = self.applicants.find_by_id(applicant_oid) if applicant_oid else None
        if not applicant:
            return None, OperationResult(Outcome.not_found, not_found_message)
        if str(applicant["providerId"]) != str(provider_id):
            return None, OperationResult(Outcome.forbidden, "You are unauthorized to do the action!")
        return applicant, None

    def reject_applicant(self, applicant_id: Any, requester_provider_id: Any) -> OperationResult:
        applicant, failure = self._owned_applicant(
            applicant_id, requester_provider_id, "Applicant not found!"
        )
        if failure:
            return failure

        self.applicants.delete_by_id(applicant["_id"])
        clear_resume(applicant.get("resume"))

        logger.info("Provider %s rejected applicant %s", requester_provider_id, applicant["_id"])
        return OperationResult(Outcome.success, "Applicant rejected successfully!")

    def shortlist_applicant(self, applicant_id: Any, requester_provider_id: Any) -> OperationResult:
        applicant, failure = self._owned_applicant(
            applicant_id, requester_provider_id, "Applicant not found"
        )
        if failure:
            return failure

        already = OperationResult(Outcome.already_shortlisted, "Already shortlisted!")
        if applicant.get("status") == SHORTLISTED_STATUS:
            return already
        if not self.applicants.mark_shortlisted(applicant["_id"], SHORTLISTED_STATUS):
            # changed since it was read: shortlisted or rejected by another request
            if not self.applicants.find_by_id(applicant["_id"]):
                return OperationResult(Outcome.not_found, "Applicant not found")
            return already

        return OperationResult(Outcome.success, "Shortlisted the candidate!")


def get_integrity_service() -> IntegrityService:
    """FastAPI dependency - fresh service bound to the current database handle."""
    return IntegrityService()
