"""SQLAlchemy-backed store.

Each primitive runs in its own short transaction. Uniqueness is backed by
database constraints; an ``IntegrityError`` raised by a concurrent writer
is translated to the same typed error the pre-check would have raised.
"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import TypeVar
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from orbit_rbac.core.database.models import (
    MembershipModel,
    OrganizationModel,
    PermissionModel,
    RoleAssignmentModel,
    RoleModel,
    RolePermissionModel,
)
from orbit_rbac.core.errors import (
    AlreadyMemberError,
    DuplicateIdentifierError,
    DuplicateNameError,
    UnknownRoleError,
)
from orbit_rbac.core.utils import normalize_role_name
from orbit_rbac.rbac.schemas import (
    Membership,
    MembershipTier,
    Organization,
    Permission,
    Role,
    RoleAssignment,
)


logger = structlog.get_logger()

T = TypeVar("T")


class SqlAlchemyStore:
    """Relational implementation of :class:`~orbit_rbac.stores.base.AuthzStore`.

    Usage:
        engine = create_db_engine("sqlite:///rbac.db")
        create_schema(engine)
        store = SqlAlchemyStore(create_session_factory(engine))
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self.session_factory.begin() as session:
            yield session

    def _insert(self, row: object, on_conflict: Callable[[], Exception]) -> None:
        try:
            with self._transaction() as session:
                session.add(row)
        except IntegrityError as exc:
            logger.debug("store_integrity_error", error=str(exc.orig))
            raise on_conflict() from exc

    def _read(self, fn: Callable[[Session], T]) -> T:
        with self.session_factory() as session:
            return fn(session)

    # Organizations

    def add_organization(self, organization: Organization) -> Organization:
        def conflict() -> Exception:
            return DuplicateIdentifierError(
                f"Organization slug '{organization.slug}' is already taken",
                details={"slug": organization.slug},
            )

        if self.get_organization_by_slug(organization.slug) is not None:
            raise conflict()
        self._insert(OrganizationModel(**organization.model_dump()), conflict)
        return organization

    def get_organization(self, organization_id: UUID) -> Organization | None:
        row = self._read(lambda s: s.get(OrganizationModel, organization_id))
        return Organization.model_validate(row) if row else None

    def get_organization_by_slug(self, slug: str) -> Organization | None:
        row = self._read(
            lambda s: s.scalar(
                select(OrganizationModel).where(OrganizationModel.slug == slug)
            )
        )
        return Organization.model_validate(row) if row else None

    def list_organizations(self) -> list[Organization]:
        rows = self._read(
            lambda s: s.scalars(
                select(OrganizationModel).order_by(OrganizationModel.created_at)
            ).all()
        )
        return [Organization.model_validate(row) for row in rows]

    # Permission catalog

    def add_permission(self, permission: Permission) -> Permission:
        def conflict() -> Exception:
            return DuplicateIdentifierError(
                f"Permission '{permission.id}' is already registered",
                details={"permission_id": permission.id},
            )

        try:
            with self._transaction() as session:
                if session.get(PermissionModel, permission.id) is not None:
                    raise conflict()
                position = session.scalar(
                    select(func.coalesce(func.max(PermissionModel.position), 0))
                )
                session.add(
                    PermissionModel(**permission.model_dump(), position=position + 1)
                )
        except IntegrityError as exc:
            raise conflict() from exc
        return permission

    def get_permission(self, permission_id: str) -> Permission | None:
        row = self._read(lambda s: s.get(PermissionModel, permission_id))
        return Permission.model_validate(row) if row else None

    def list_permissions(self) -> list[Permission]:
        rows = self._read(
            lambda s: s.scalars(
                select(PermissionModel).order_by(
                    PermissionModel.position, PermissionModel.id
                )
            ).all()
        )
        return [Permission.model_validate(row) for row in rows]

    # Roles

    def add_role(self, role: Role) -> Role:
        def conflict() -> Exception:
            return DuplicateNameError(details={"name": role.name})

        if self.find_role_by_name(role.organization_id, role.name) is not None:
            raise conflict()
        self._insert(
            RoleModel(**role.model_dump(), name_key=normalize_role_name(role.name)),
            conflict,
        )
        return role

    def update_role(self, role: Role) -> Role:
        existing = self.find_role_by_name(role.organization_id, role.name)
        if existing is not None and existing.id != role.id:
            raise DuplicateNameError(details={"name": role.name})
        try:
            with self._transaction() as session:
                result = session.execute(
                    update(RoleModel)
                    .where(RoleModel.id == role.id, RoleModel.deleted_at.is_(None))
                    .values(
                        name=role.name,
                        name_key=normalize_role_name(role.name),
                        description=role.description,
                        purpose=role.purpose,
                        department=role.department,
                    )
                )
                if result.rowcount == 0:
                    raise UnknownRoleError(role.id)
                updated = Role.model_validate(session.get(RoleModel, role.id))
        except IntegrityError as exc:
            raise DuplicateNameError(details={"name": role.name}) from exc
        return updated

    def get_role(self, role_id: UUID) -> Role | None:
        row = self._read(lambda s: s.get(RoleModel, role_id))
        return Role.model_validate(row) if row else None

    def get_roles(self, role_ids: Iterable[UUID]) -> list[Role]:
        ids = list(role_ids)
        if not ids:
            return []
        rows = self._read(
            lambda s: s.scalars(select(RoleModel).where(RoleModel.id.in_(ids))).all()
        )
        return [Role.model_validate(row) for row in rows]

    def find_role_by_name(self, organization_id: UUID, name: str) -> Role | None:
        row = self._read(
            lambda s: s.scalar(
                select(RoleModel).where(
                    RoleModel.organization_id == organization_id,
                    RoleModel.name_key == normalize_role_name(name),
                    RoleModel.deleted_at.is_(None),
                )
            )
        )
        return Role.model_validate(row) if row else None

    def list_roles(
        self, organization_id: UUID, include_deleted: bool = False
    ) -> list[Role]:
        stmt = (
            select(RoleModel)
            .where(RoleModel.organization_id == organization_id)
            .order_by(RoleModel.created_at)
        )
        if not include_deleted:
            stmt = stmt.where(RoleModel.deleted_at.is_(None))
        rows = self._read(lambda s: s.scalars(stmt).all())
        return [Role.model_validate(row) for row in rows]

    def mark_role_deleted(self, role_id: UUID, deleted_at: datetime) -> Role | None:
        with self._transaction() as session:
            session.execute(
                update(RoleModel)
                .where(RoleModel.id == role_id, RoleModel.deleted_at.is_(None))
                .values(deleted_at=deleted_at)
            )
        return self.get_role(role_id)

    # Role grants

    def add_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        try:
            with self._transaction() as session:
                if session.get(RolePermissionModel, (role_id, permission_id)):
                    return False
                session.add(
                    RolePermissionModel(role_id=role_id, permission_id=permission_id)
                )
        except IntegrityError:
            # Lost a race against an identical grant
            return False
        return True

    def remove_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        with self._transaction() as session:
            result = session.execute(
                delete(RolePermissionModel).where(
                    RolePermissionModel.role_id == role_id,
                    RolePermissionModel.permission_id == permission_id,
                )
            )
        return result.rowcount > 0

    def role_permission_ids(self, role_id: UUID) -> frozenset[str]:
        ids = self._read(
            lambda s: s.scalars(
                select(RolePermissionModel.permission_id).where(
                    RolePermissionModel.role_id == role_id
                )
            ).all()
        )
        return frozenset(ids)

    # Memberships

    def add_membership(self, membership: Membership) -> Membership:
        def conflict() -> Exception:
            return AlreadyMemberError(
                details={
                    "user_id": str(membership.user_id),
                    "organization_id": str(membership.organization_id),
                }
            )

        if self.get_membership(membership.user_id, membership.organization_id):
            raise conflict()
        self._insert(MembershipModel(**membership.model_dump()), conflict)
        return membership

    def get_membership(self, user_id: UUID, organization_id: UUID) -> Membership | None:
        row = self._read(lambda s: s.get(MembershipModel, (user_id, organization_id)))
        return Membership.model_validate(row) if row else None

    def set_membership_tier(
        self, user_id: UUID, organization_id: UUID, tier: MembershipTier
    ) -> Membership | None:
        with self._transaction() as session:
            session.execute(
                update(MembershipModel)
                .where(
                    MembershipModel.user_id == user_id,
                    MembershipModel.organization_id == organization_id,
                )
                .values(tier=tier)
            )
        return self.get_membership(user_id, organization_id)

    def remove_membership(self, user_id: UUID, organization_id: UUID) -> bool:
        with self._transaction() as session:
            result = session.execute(
                delete(MembershipModel).where(
                    MembershipModel.user_id == user_id,
                    MembershipModel.organization_id == organization_id,
                )
            )
        return result.rowcount > 0

    def list_memberships(self, organization_id: UUID) -> list[Membership]:
        rows = self._read(
            lambda s: s.scalars(
                select(MembershipModel)
                .where(MembershipModel.organization_id == organization_id)
                .order_by(MembershipModel.created_at)
            ).all()
        )
        return [Membership.model_validate(row) for row in rows]

    # Role assignments

    def add_assignment(self, assignment: RoleAssignment) -> bool:
        key = (assignment.user_id, assignment.role_id, assignment.organization_id)
        try:
            with self._transaction() as session:
                if session.get(RoleAssignmentModel, key):
                    return False
                session.add(RoleAssignmentModel(**assignment.model_dump()))
        except IntegrityError:
            # Lost a race against an identical assignment
            return False
        return True

    def get_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> RoleAssignment | None:
        row = self._read(
            lambda s: s.get(RoleAssignmentModel, (user_id, role_id, organization_id))
        )
        return RoleAssignment.model_validate(row) if row else None

    def remove_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> bool:
        with self._transaction() as session:
            result = session.execute(
                delete(RoleAssignmentModel).where(
                    RoleAssignmentModel.user_id == user_id,
                    RoleAssignmentModel.role_id == role_id,
                    RoleAssignmentModel.organization_id == organization_id,
                )
            )
        return result.rowcount > 0

    def list_assignments(
        self, user_id: UUID, organization_id: UUID
    ) -> list[RoleAssignment]:
        rows = self._read(
            lambda s: s.scalars(
                select(RoleAssignmentModel).where(
                    RoleAssignmentModel.user_id == user_id,
                    RoleAssignmentModel.organization_id == organization_id,
                )
            ).all()
        )
        return [RoleAssignment.model_validate(row) for row in rows]
