import os

from bson import ObjectId

from jobboard.schemas.schemas import UserRole
from jobboard.services.integrity_service import Outcome, format_applied_date


def _post_job(service, owner, job_fields, title=None):
    fields = dict(job_fields)
    if title:
        fields["title"] = title
    result = service.add_job(fields, owner["_id"])
    assert result.ok
    return ObjectId(result.data["jobId"])


def _apply(service, job_id, seeker, resume_path, provider_id=None):
    return service.apply_to_job(job_id, seeker["_id"], provider_id, resume_path)


# ============================================================
# add_job
# ============================================================

def test_add_job_records_owner_and_jobs_posted(db, service, provider, job_fields):
    job_id = _post_job(service, provider, job_fields)

    job = db.jobs.find_one({"_id": job_id})
    assert job["providerId"] == provider["_id"]
    assert db.users.find_one({"_id": provider["_id"]})["jobsPosted"] == [job_id]


# ============================================================
# apply_to_job
# ============================================================

def test_apply_creates_applicant_with_applied_status(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()

    result = _apply(service, job_id, seeker, path, provider_id=str(provider["_id"]))

    assert result.outcome == Outcome.success
    assert result.message == "Successfully applied for the job!"
    applicant = db.applicants.find_one({"_id": ObjectId(result.data["applicantId"])})
    assert applicant["userId"] == seeker["_id"]
    assert applicant["jobId"] == job_id
    assert applicant["providerId"] == provider["_id"]
    assert applicant["resume"] == path
    assert applicant["status"] == "Applied on " + format_applied_date()
    assert os.path.exists(path)


def test_apply_twice_keeps_one_applicant_and_removes_second_upload(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    first, second = make_resume(), make_resume()

    assert _apply(service, job_id, seeker, first).ok
    result = _apply(service, job_id, seeker, second)

    assert result.outcome == Outcome.duplicate_application
    assert result.message == "You have already applied for the job!"
    assert db.applicants.count_documents({"userId": seeker["_id"], "jobId": job_id}) == 1
    assert os.path.exists(first)
    assert not os.path.exists(second)


def test_apply_unique_index_catches_race_past_precheck(db, service, provider, seeker, job_fields, make_resume, monkeypatch):
    job_id = _post_job(service, provider, job_fields)
    assert _apply(service, job_id, seeker, make_resume()).ok

    # a concurrent request that passed the existence check before the first insert
    monkeypatch.setattr(service.applicants, "get_for_pair", lambda user_id, job_id: None)
    late = make_resume()
    result = _apply(service, job_id, seeker, late)

    assert result.outcome == Outcome.duplicate_application
    assert db.applicants.count_documents({}) == 1
    assert not os.path.exists(late)


def test_apply_to_missing_job_removes_upload(db, service, seeker, make_resume):
    path = make_resume()

    result = _apply(service, ObjectId(), seeker, path)

    assert result.outcome == Outcome.not_found
    assert db.applicants.count_documents({}) == 0
    assert not os.path.exists(path)


def test_apply_with_wrong_provider_is_forbidden(db, service, provider, seeker, make_user, job_fields, make_resume):
    other = make_user("Other", UserRole.provider)
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()

    result = _apply(service, job_id, seeker, path, provider_id=str(other["_id"]))

    assert result.outcome == Outcome.forbidden
    assert db.applicants.count_documents({}) == 0
    assert not os.path.exists(path)


# ============================================================
# shortlist_applicant / reject_applicant
# ============================================================

def test_shortlist_twice_reports_already_shortlisted(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    applicant_id = _apply(service, job_id, seeker, make_resume()).data["applicantId"]

    first = service.shortlist_applicant(applicant_id, provider["_id"])
    second = service.shortlist_applicant(applicant_id, provider["_id"])

    assert first.outcome == Outcome.success
    assert first.message == "Shortlisted the candidate!"
    assert second.outcome == Outcome.already_shortlisted
    assert second.message == "Already shortlisted!"
    assert db.applicants.find_one({"_id": ObjectId(applicant_id)})["status"] == "Shortlisted"


def test_shortlist_by_other_provider_is_forbidden(db, service, provider, seeker, make_user, job_fields, make_resume):
    other = make_user("Other", UserRole.provider)
    job_id = _post_job(service, provider, job_fields)
    applicant_id = _apply(service, job_id, seeker, make_resume()).data["applicantId"]

    result = service.shortlist_applicant(applicant_id, other["_id"])

    assert result.outcome == Outcome.forbidden
    assert db.applicants.find_one({"_id": ObjectId(applicant_id)})["status"].startswith("Applied on ")


def test_shortlist_and_reject_unknown_applicant(service, provider):
    assert service.shortlist_applicant(ObjectId(), provider["_id"]).outcome == Outcome.not_found
    assert service.reject_applicant("not-an-id", provider["_id"]).outcome == Outcome.not_found


def test_shortlist_loses_race_to_concurrent_shortlist(db, service, provider, seeker, job_fields, make_resume, monkeypatch):
    job_id = _post_job(service, provider, job_fields)
    applicant_id = ObjectId(_apply(service, job_id, seeker, make_resume()).data["applicantId"])
    stale = db.applicants.find_one({"_id": applicant_id})
    db.applicants.update_one({"_id": applicant_id}, {"$set": {"status": "Shortlisted"}})
    monkeypatch.setattr(service.applicants, "find_by_id", lambda doc_id: stale)

    result = service.shortlist_applicant(applicant_id, provider["_id"])

    assert result.outcome == Outcome.already_shortlisted
    assert db.applicants.find_one({"_id": applicant_id})["status"] == "Shortlisted"


def test_shortlist_of_applicant_rejected_meanwhile_is_not_found(db, service, provider, seeker, job_fields, make_resume, monkeypatch):
    job_id = _post_job(service, provider, job_fields)
    applicant_id = ObjectId(_apply(service, job_id, seeker, make_resume()).data["applicantId"])
    reads = iter([db.applicants.find_one({"_id": applicant_id})])
    db.applicants.delete_one({"_id": applicant_id})
    monkeypatch.setattr(service.applicants, "find_by_id", lambda doc_id: next(reads, None))

    result = service.shortlist_applicant(applicant_id, provider["_id"])

    assert result.outcome == Outcome.not_found
    assert db.applicants.count_documents({}) == 0


def test_reject_removes_record_and_resume(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()
    applicant_id = _apply(service, job_id, seeker, path).data["applicantId"]

    result = service.reject_applicant(applicant_id, provider["_id"])

    assert result.outcome == Outcome.success
    assert result.message == "Applicant rejected successfully!"
    assert db.applicants.count_documents({}) == 0
    assert not os.path.exists(path)


def test_reject_by_other_provider_keeps_record_and_resume(db, service, provider, seeker, make_user, job_fields, make_resume):
    other = make_user("Other", UserRole.provider)
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()
    applicant_id = _apply(service, job_id, seeker, path).data["applicantId"]

    result = service.reject_applicant(applicant_id, other["_id"])

    assert result.outcome == Outcome.forbidden
    assert result.message == "You are unauthorized to do the action!"
    assert db.applicants.count_documents({}) == 1
    assert os.path.exists(path)


def test_reject_tolerates_missing_resume_file(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()
    applicant_id = _apply(service, job_id, seeker, path).data["applicantId"]
    os.remove(path)

    result = service.reject_applicant(applicant_id, provider["_id"])

    assert result.ok
    assert db.applicants.count_documents({}) == 0


# ============================================================
# delete_job
# ============================================================

def test_delete_job_removes_its_applicants_and_files(db, service, provider, make_user, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    kept_job = _post_job(service, provider, job_fields, title="Frontend Engineer")
    seekers = [make_user(f"Seeker{i}", UserRole.seeker) for i in range(3)]
    paths = [make_resume() for _ in seekers]
    for seeker, path in zip(seekers, paths):
        assert _apply(service, job_id, seeker, path).ok
    kept_path = make_resume()
    assert _apply(service, kept_job, seekers[0], kept_path).ok

    result = service.delete_job(job_id, provider["_id"], require_ownership=True)

    assert result.outcome == Outcome.success
    assert result.message == "Job record was deleted successfully!"
    assert result.data["applicantsDeleted"] == 3
    assert db.jobs.find_one({"_id": job_id}) is None
    assert db.applicants.count_documents({"jobId": job_id}) == 0
    assert not any(os.path.exists(p) for p in paths)
    assert db.users.find_one({"_id": provider["_id"]})["jobsPosted"] == [kept_job]
    assert db.applicants.count_documents({"jobId": kept_job}) == 1
    assert os.path.exists(kept_path)


def test_delete_job_requires_ownership_when_asked(db, service, provider, make_user, job_fields):
    other = make_user("Other", UserRole.provider)
    job_id = _post_job(service, provider, job_fields)

    result = service.delete_job(job_id, other["_id"], require_ownership=True)

    assert result.outcome == Outcome.not_found
    assert result.message == "Cannot delete job. Job not found!"
    assert db.jobs.count_documents({}) == 1


def test_admin_delete_job_pulls_from_owner(db, service, admin, provider, job_fields):
    job_id = _post_job(service, provider, job_fields)

    result = service.delete_job(str(job_id), admin["_id"], require_ownership=False)

    assert result.ok
    assert db.users.find_one({"_id": provider["_id"]})["jobsPosted"] == []


def test_delete_unknown_job(service, admin):
    assert service.delete_job(ObjectId(), admin["_id"], require_ownership=False).outcome == Outcome.not_found
    assert service.delete_job("bogus", admin["_id"], require_ownership=False).outcome == Outcome.not_found


# ============================================================
# delete_user
# ============================================================

def test_self_deletion_is_forbidden_and_changes_nothing(db, service, admin):
    result = service.delete_user(str(admin["_id"]), admin["_id"])

    assert result.outcome == Outcome.forbidden
    assert result.message == "Cannot delete the current User"
    assert db.users.find_one({"_id": admin["_id"]}) is not None


def test_self_deletion_with_uppercase_id_is_forbidden(db, service, admin):
    result = service.delete_user(str(admin["_id"]).upper(), str(admin["_id"]))

    assert result.outcome == Outcome.forbidden
    assert db.users.find_one({"_id": admin["_id"]}) is not None


def test_delete_unknown_user(service, admin):
    result = service.delete_user(ObjectId(), admin["_id"])

    assert result.outcome == Outcome.not_found
    assert result.message == "Cannot delete user. User not found!"


def test_delete_provider_cascades_to_jobs_applicants_and_files(db, service, admin, provider, make_user, job_fields, make_resume):
    first = _post_job(service, provider, job_fields)
    second = _post_job(service, provider, job_fields, title="Data Engineer")
    alice = make_user("Alice", UserRole.seeker)
    bob = make_user("Bob", UserRole.seeker)
    path_a, path_b = make_resume(), make_resume()
    assert _apply(service, first, alice, path_a).ok
    assert _apply(service, second, bob, path_b).ok

    result = service.delete_user(provider["_id"], admin["_id"])

    assert result.outcome == Outcome.success
    assert result.message == "User record was deleted successfully!"
    assert result.data == {"jobsDeleted": 2, "applicantsDeleted": 2}
    assert db.users.find_one({"_id": provider["_id"]}) is None
    assert db.jobs.count_documents({"providerId": provider["_id"]}) == 0
    assert db.applicants.count_documents({"jobId": {"$in": [first, second]}}) == 0
    assert not os.path.exists(path_a)
    assert not os.path.exists(path_b)
    assert db.users.count_documents({"_id": {"$in": [alice["_id"], bob["_id"]]}}) == 2


def test_delete_provider_also_removes_jobs_missing_from_jobs_posted(db, service, admin, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    db.users.update_one({"_id": provider["_id"]}, {"$set": {"jobsPosted": []}})
    path = make_resume()
    assert _apply(service, job_id, seeker, path).ok

    assert service.delete_user(provider["_id"], admin["_id"]).ok

    assert db.jobs.count_documents({}) == 0
    assert db.applicants.count_documents({}) == 0
    assert not os.path.exists(path)


def test_delete_seeker_removes_only_their_applications(db, service, admin, provider, seeker, make_user, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    other = make_user("Other", UserRole.seeker)
    mine, theirs = make_resume(), make_resume()
    assert _apply(service, job_id, seeker, mine).ok
    assert _apply(service, job_id, other, theirs).ok

    result = service.delete_user(str(seeker["_id"]), str(admin["_id"]))

    assert result.data == {"jobsDeleted": 0, "applicantsDeleted": 1}
    assert db.jobs.count_documents({}) == 1
    assert db.applicants.count_documents({"userId": seeker["_id"]}) == 0
    assert db.applicants.count_documents({"userId": other["_id"]}) == 1
    assert not os.path.exists(mine)
    assert os.path.exists(theirs)


# ============================================================
# scenarios
# ============================================================

def test_apply_shortlist_then_delete_job(db, service, provider, seeker, job_fields, make_resume):
    job_id = _post_job(service, provider, job_fields)
    path = make_resume()
    applicant_id = ObjectId(_apply(service, job_id, seeker, path, provider["_id"]).data["applicantId"])
    assert db.applicants.find_one({"_id": applicant_id})["status"] == "Applied on " + format_applied_date()

    assert service.shortlist_applicant(applicant_id, provider["_id"]).ok
    assert db.applicants.find_one({"_id": applicant_id})["status"] == "Shortlisted"

    assert service.delete_job(job_id, provider["_id"], require_ownership=True).ok
    assert db.applicants.find_one({"_id": applicant_id}) is None
    assert not os.path.exists(path)
    assert db.jobs.find_one({"_id": job_id}) is None
    assert job_id not in db.users.find_one({"_id": provider["_id"]})["jobsPosted"]
