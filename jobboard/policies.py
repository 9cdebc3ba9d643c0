"""Authorization policies.

Every ``can_*`` function is a pure decision over the acting identity and the
record it targets. Each one matches on the actor's role exhaustively, so a
new role fails loudly in ``assert_never`` instead of quietly denying.

Callers turn a decision into an outcome with :func:`authorize`, which raises
the same :class:`~jobboard.errors.Forbidden` for every denial.
"""
import logging
from dataclasses import dataclass
from typing import Callable, assert_never

from .errors import Forbidden
from .models import Application, ApplicationStatus, CV, JobOffer, User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated identity an operation is performed as."""

    id: int
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role))


def authorize(allowed: bool, action: str, actor: Actor) -> None:
    if not allowed:
        logger.info(f"Denied '{action}' for user {actor.id} ({actor.role.value})")
        raise Forbidden()


# Job offers

def can_view_any_job_offers(actor: Actor) -> bool:
    return True


def can_view_job_offer(actor: Actor, job_offer: JobOffer) -> bool:
    return True


def can_create_job_offer(actor: Actor) -> bool:
    match actor.role:
        case UserRole.RECRUITER | UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE:
            return False
        case _:
            assert_never(actor.role)


def can_update_job_offer(actor: Actor, job_offer: JobOffer) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.RECRUITER:
            return job_offer.recruiter_id == actor.id
        case UserRole.CANDIDATE:
            return False
        case _:
            assert_never(actor.role)


def can_delete_job_offer(actor: Actor, job_offer: JobOffer) -> bool:
    return can_update_job_offer(actor, job_offer)


# Applications

def _owns_parent_offer(actor: Actor, application: Application) -> bool:
    return application.job_offer.recruiter_id == actor.id


def _is_pending_owner(actor: Actor, application: Application) -> bool:
    return (
        application.user_id == actor.id
        and application.status == ApplicationStatus.PENDING
    )


def can_view_any_applications(actor: Actor) -> bool:
    match actor.role:
        case UserRole.CANDIDATE | UserRole.RECRUITER | UserRole.ADMIN:
            return True
        case _:
            assert_never(actor.role)


def can_view_application(actor: Actor, application: Application) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE:
            return application.user_id == actor.id
        case UserRole.RECRUITER:
            return _owns_parent_offer(actor, application)
        case _:
            assert_never(actor.role)


def can_create_application(actor: Actor) -> bool:
    match actor.role:
        case UserRole.CANDIDATE:
            return True
        case UserRole.RECRUITER | UserRole.ADMIN:
            return False
        case _:
            assert_never(actor.role)


def can_update_application(actor: Actor, application: Application) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE:
            return _is_pending_owner(actor, application)
        case UserRole.RECRUITER:
            # status changes are allowed whatever the current status
            return _owns_parent_offer(actor, application)
        case _:
            assert_never(actor.role)


def can_delete_application(actor: Actor, application: Application) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE:
            return _is_pending_owner(actor, application)
        case UserRole.RECRUITER:
            return False
        case _:
            assert_never(actor.role)


def can_list_job_offer_applications(actor: Actor, job_offer: JobOffer) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.RECRUITER:
            return job_offer.recruiter_id == actor.id
        case UserRole.CANDIDATE:
            return False
        case _:
            assert_never(actor.role)


# Users

def can_view_any_users(actor: Actor) -> bool:
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE | UserRole.RECRUITER:
            return False
        case _:
            assert_never(actor.role)


def can_view_user(actor: Actor, user: User) -> bool:
    if user.id == actor.id:
        return True
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.RECRUITER:
            return user.role == UserRole.CANDIDATE
        case UserRole.CANDIDATE:
            return False
        case _:
            assert_never(actor.role)


def can_update_user(actor: Actor, user: User) -> bool:
    if user.id == actor.id:
        return True
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE | UserRole.RECRUITER:
            return False
        case _:
            assert_never(actor.role)


def can_delete_user(actor: Actor, user: User) -> bool:
    return can_update_user(actor, user)


# CVs

def can_view_cv(actor: Actor, cv: CV, has_applied_to_actor: Callable[[], bool]) -> bool:
    """Owner and admins always; a recruiter only once the CV's owner has
    applied to one of their offers.

    ``has_applied_to_actor`` is evaluated for recruiters only, so callers can
    hand in a lazy database lookup.
    """
    if cv.user_id == actor.id:
        return True
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.RECRUITER:
            return has_applied_to_actor()
        case UserRole.CANDIDATE:
            return False
        case _:
            assert_never(actor.role)


def can_update_cv(actor: Actor, cv: CV) -> bool:
    if cv.user_id == actor.id:
        return True
    match actor.role:
        case UserRole.ADMIN:
            return True
        case UserRole.CANDIDATE | UserRole.RECRUITER:
            return False
        case _:
            assert_never(actor.role)


def can_delete_cv(actor: Actor, cv: CV) -> bool:
    return can_update_cv(actor, cv)
