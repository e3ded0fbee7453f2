"""Print the roles and effective permissions of a person in a tenant.

Usage:
    python -m scripts.show_permissions <person_id> <tenant_id_or_slug> [permission]
With a permission, also prints the decision and which step made it.
"""

import asyncio
import sys

from authcore.application.dtos.decision import PermissionContext
from authcore.application.services import (
    ConditionEvaluator,
    PermissionEvaluator,
    RoleStore,
)
from authcore.core.config import get_settings
from authcore.infrastructure.persistence.database import dispose_engine, session_scope
from authcore.infrastructure.persistence.repositories import (
    CustomRoleRepository,
    PersonRepository,
    RoleAssignmentRepository,
    TenantRepository,
)


async def show(person_id: str, tenant_ref: str, permission: str | None) -> int:
    settings = get_settings()
    async with session_scope() as session:
        tenant = await TenantRepository(session).get_by_id_or_slug(tenant_ref)
        if tenant is None:
            print(f"Tenant not found: {tenant_ref}", file=sys.stderr)
            return 1
        persons = PersonRepository(session)
        person = await persons.get_by_id(person_id)
        if person is None:
            print(f"Person not found: {person_id}", file=sys.stderr)
            return 1
        custom_roles = CustomRoleRepository(session)
        store = RoleStore(RoleAssignmentRepository(session), persons, custom_roles)
        evaluator = PermissionEvaluator(
            store,
            custom_roles,
            ConditionEvaluator(persons),
            legacy_unscoped_grant=settings.legacy_unscoped_grant,
        )

        print(f"Person {person.id} (global role: {person.global_role or '-'})")
        print(f"Tenant {tenant.slug} ({tenant.id})")
        print("Roles:")
        for role in await store.get_user_roles(person.id, tenant.id):
            scope = role.role_scope.value if role.role_scope else "-"
            company = role.company_id or "-"
            print(f"  {role.role_type:<24} scope={scope:<10} company={company} id={role.id}")
        print("Effective permissions:")
        for perm in sorted(await evaluator.get_user_permissions(person.id, tenant.id)):
            print(f"  {perm}")

        if permission:
            decision = await evaluator.evaluate(
                person.id, permission, PermissionContext(tenant_id=tenant.id)
            )
            verdict = "GRANTED" if decision.granted else "DENIED"
            print(f"{permission}: {verdict} via {decision.source} (role={decision.role_type})")
    return 0


async def main() -> None:
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.show_permissions <person_id> <tenant_id_or_slug> [permission]",
            file=sys.stderr,
        )
        sys.exit(1)
    permission = sys.argv[3] if len(sys.argv) > 3 else None
    try:
        code = await show(sys.argv[1], sys.argv[2], permission)
    finally:
        await dispose_engine()
    sys.exit(code)


if __name__ == "__main__":
    asyncio.run(main())
