"""Service for user profiles and user administration."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from jobportal.api.schemas.user_schemas import (
    AddEducationRequest,
    AddExperienceRequest,
    ResumeRequest,
    UpdateCandidateProfileRequest,
    UpdateEducationRequest,
    UpdateEmployerProfileRequest,
    UpdateExperienceRequest,
    UpdateProfileRequest,
)
from jobportal.models import (
    CandidateProfile,
    EducationEntry,
    EmployerProfile,
    ResumeReference,
    User,
    UserProfile,
    UserRole,
    WorkExperience,
)
from jobportal.repositories.user_repository import UserRepository
from jobportal.utils.pagination import build_pagination, page_offset

logger = logging.getLogger(__name__)

DEFAULT_RESUME_FILENAME = "resume.pdf"


class UserService:
    """Service for reading and updating user accounts.

    Attributes:
        user_repository: Repository for user data access.
    """

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def get_user(self, user_id: str) -> User:
        """Load a user by ID.

        Raises:
            ValueError: If user not found.
        """
        record = self.user_repository.get_by_id(user_id)
        if not record:
            raise ValueError(f"User with ID {user_id} not found")
        return User.model_validate(record)

    def get_profile(self, user: User) -> User:
        """Reload the caller's own account."""
        return self.get_user(user.id)

    def update_profile(self, user: User, request: UpdateProfileRequest) -> User:
        """Merge the provided general profile fields into the user's profile."""
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        profile = UserProfile.model_validate({**user.profile.model_dump(), **changes})
        return self._save(user.id, {"profile": profile.to_record(exclude_none=False)})

    def update_candidate_profile(self, user: User, request: UpdateCandidateProfileRequest) -> User:
        """Replace the provided sections of a candidate's profile.

        Raises:
            PermissionError: If the caller is not a candidate.
        """
        if not user.is_candidate:
            raise PermissionError("Only candidates have a candidate profile")

        current = user.candidate_profile or CandidateProfile()
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        profile = CandidateProfile.model_validate({**current.model_dump(), **changes})
        return self._save(user.id, {"candidateProfile": profile.to_record(exclude_none=False)})

    def add_experience(self, user: User, request: AddExperienceRequest) -> WorkExperience:
        """Append a work experience entry to the caller's candidate profile."""
        entry = WorkExperience.model_validate(request.model_dump())
        profile = self._candidate_profile(user)
        profile.experience.append(entry)
        self._save_candidate_profile(user.id, profile)
        return entry

    def update_experience(self, user: User, entry_id: str, request: UpdateExperienceRequest) -> WorkExperience:
        """Merge the provided fields into one experience entry.

        Raises:
            PermissionError: If the caller is not a candidate.
            ValueError: If the entry does not exist.
        """
        profile = self._candidate_profile(user)
        index = self._entry_index(profile.experience, entry_id, "Experience")
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        entry = WorkExperience.model_validate({**profile.experience[index].model_dump(), **changes})
        profile.experience[index] = entry
        self._save_candidate_profile(user.id, profile)
        return entry

    def delete_experience(self, user: User, entry_id: str) -> None:
        profile = self._candidate_profile(user)
        del profile.experience[self._entry_index(profile.experience, entry_id, "Experience")]
        self._save_candidate_profile(user.id, profile)

    def add_education(self, user: User, request: AddEducationRequest) -> EducationEntry:
        """Append an education entry to the caller's candidate profile."""
        entry = EducationEntry.model_validate(request.model_dump())
        profile = self._candidate_profile(user)
        profile.education.append(entry)
        self._save_candidate_profile(user.id, profile)
        return entry

    def update_education(self, user: User, entry_id: str, request: UpdateEducationRequest) -> EducationEntry:
        profile = self._candidate_profile(user)
        index = self._entry_index(profile.education, entry_id, "Education")
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        entry = EducationEntry.model_validate({**profile.education[index].model_dump(), **changes})
        profile.education[index] = entry
        self._save_candidate_profile(user.id, profile)
        return entry

    def delete_education(self, user: User, entry_id: str) -> None:
        profile = self._candidate_profile(user)
        del profile.education[self._entry_index(profile.education, entry_id, "Education")]
        self._save_candidate_profile(user.id, profile)

    def set_resume(self, user: User, request: ResumeRequest) -> ResumeReference:
        """Store a reference to the candidate's resume, replacing any previous one.

        The file itself is hosted elsewhere; only its URL and name are kept.
        """
        resume = ResumeReference(url=request.resume_url, filename=request.filename or DEFAULT_RESUME_FILENAME)
        profile = self._candidate_profile(user)
        profile.resume = resume
        self._save_candidate_profile(user.id, profile)
        return resume

    def delete_resume(self, user: User) -> None:
        profile = self._candidate_profile(user)
        if profile.resume is not None:
            profile.resume = None
            self._save_candidate_profile(user.id, profile)

    def update_employer_profile(self, user: User, request: UpdateEmployerProfileRequest) -> User:
        """Merge the provided fields into an employer's company profile.

        Raises:
            PermissionError: If the caller is not an employer.
        """
        if not user.is_employer:
            raise PermissionError("Only employers have an employer profile")

        current = user.employer_profile or EmployerProfile()
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        # Verification is granted by admins only
        profile = EmployerProfile.model_validate({**current.model_dump(), **changes, "verified": current.verified})
        return self._save(user.id, {"employerProfile": profile.to_record(exclude_none=False)})

    def list_users(
        self,
        admin: User,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict[str, Any]:
        """List user accounts for admins."""
        self._require_admin(admin)

        records, total = self.user_repository.search(
            role=role.value if isinstance(role, UserRole) else role,
            is_active=is_active,
            search=search,
            offset=page_offset(page, limit),
            limit=limit
        )
        return {
            "users": [User.model_validate(record) for record in records],
            "pagination": build_pagination(page, limit, total, len(records)),
            "total": total
        }

    def set_user_active(self, admin: User, user_id: str, is_active: bool) -> User:
        """Activate or deactivate an account.

        Raises:
            PermissionError: If the caller is not an admin.
            ValueError: If the user is missing or is the calling admin.
        """
        self._require_admin(admin)
        self.get_user(user_id)
        if user_id == admin.id:
            raise ValueError("Cannot deactivate your own account")

        logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'} by {admin.id}")
        return self._save(user_id, {"isActive": is_active})

    def set_user_role(self, admin: User, user_id: str, role: UserRole) -> User:
        """Change an account's role.

        Raises:
            PermissionError: If the caller is not an admin.
            ValueError: If the user is missing or is the calling admin.
        """
        self._require_admin(admin)
        self.get_user(user_id)
        if user_id == admin.id:
            raise ValueError("Cannot change your own role")

        new_role = role.value if isinstance(role, UserRole) else role
        logger.info(f"User {user_id} role set to {new_role} by {admin.id}")
        return self._save(user_id, {"role": new_role})

    def verify_employer(self, admin: User, user_id: str) -> User:
        """Mark an employer as verified; their future jobs are auto-approved.

        Raises:
            PermissionError: If the caller is not an admin.
            ValueError: If the user is missing or not an employer.
        """
        self._require_admin(admin)
        employer = self.get_user(user_id)
        if not employer.is_employer:
            raise ValueError("User is not an employer")

        profile = (employer.employer_profile or EmployerProfile()).model_copy(update={"verified": True})
        logger.info(f"Employer {user_id} verified by {admin.id}")
        return self._save(user_id, {"employerProfile": profile.to_record(exclude_none=False)})

    def _candidate_profile(self, user: User) -> CandidateProfile:
        """Load the stored candidate profile for an entry-level edit."""
        if not user.is_candidate:
            raise PermissionError("Only candidates have a candidate profile")
        return self.get_user(user.id).candidate_profile or CandidateProfile()

    @staticmethod
    def _entry_index(entries: List[Any], entry_id: str, label: str) -> int:
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                return index
        raise ValueError(f"{label} not found")

    def _save_candidate_profile(self, user_id: str, profile: CandidateProfile) -> User:
        return self._save(user_id, {"candidateProfile": profile.to_record(exclude_none=False)})

    def _save(self, user_id: str, updates: Dict[str, Any]) -> User:
        updates["updatedAt"] = datetime.now(timezone.utc).isoformat()
        return User.model_validate(self.user_repository.update(user_id, updates))

    @staticmethod
    def _require_admin(user: User) -> None:
        if not user.is_admin:
            raise PermissionError("Admin access required")
