"""
Stage provisioner tests against the offline catalog.

Each provisioner is exercised on its own: existence-guarded creation,
grant emission per tier, and error wrapping with stage/object context.
"""

import pytest

from core.models.desired_state import DatabaseSpec, RoleSpec, SchemaSpec
from core.models.enums import ObjectKind, Stage
from core.models.results import BootstrapResult
from exceptions import (
    CreationFailure,
    ExistenceCheckFailure,
    GrantFailure,
    InvalidGrant,
    MissingCredential,
)
from infrastructure.recording import RecordingConnectionProvider
from services import (
    ALL_PROVISIONERS,
    SchemaProvisioner,
    apply_databases,
    apply_extensions,
    apply_roles,
    apply_schemas,
    get_provisioner,
)
from tests.factories.desired_state_factories import make_database, make_schema, make_schema_grant
from tests.factories.fake_catalog import FailingProvider


def _schema(**grant):
    return SchemaSpec.model_validate(make_schema(name="app", owner="app_owner", grants=[make_schema_grant(**grant)]))


class TestRoles:

    def test_absent_role_created_with_password(self, recording_provider, recording_session):
        role = RoleSpec(name="alice", can_login=True, password="s3cret")
        apply_roles(recording_session, [role])
        assert recording_provider.statements == ["CREATE ROLE \"alice\" WITH LOGIN PASSWORD '***'"]
        assert recording_provider.commands[0].command.password == "s3cret"

    def test_existing_role_not_altered_but_memberships_granted(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.ROLE, "alice")])
        role = RoleSpec(name="alice", can_login=True, password="changed", roles=["readers", "writers"])
        with provider.session() as session:
            apply_roles(session, [role])
        assert provider.statements == ['GRANT "readers" TO "alice"', 'GRANT "writers" TO "alice"']

    def test_non_login_role_has_no_password_clause(self, recording_provider, recording_session):
        apply_roles(recording_session, [RoleSpec(name="readers", password="ignored")])
        assert recording_provider.statements == ['CREATE ROLE "readers"']

    def test_login_role_without_password(self, recording_provider, recording_session):
        with pytest.raises(MissingCredential) as exc_info:
            apply_roles(recording_session, [RoleSpec(name="alice", can_login=True)])
        assert exc_info.value.stage == "roles"
        assert exc_info.value.object_name == "alice"
        assert recording_provider.commands == []

    def test_result_records_created_and_existing(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.ROLE, "old")])
        result = BootstrapResult()
        with provider.session() as session:
            apply_roles(session, [RoleSpec(name="old"), RoleSpec(name="new", roles=["old"])], result)
        step = result.steps[0]
        assert step.name == "roles"
        assert step.created == ["new"]
        assert step.existing == ["old"]
        assert step.grants == 1


class TestDatabases:

    def test_creation_options_and_grants(self, recording_provider, recording_session):
        database = DatabaseSpec.model_validate(make_database(
            name="app_db",
            owner="app_owner",
            encoding="UTF8",
            grants=[
                {"user": "alice", "privileges": ["CONNECT"]},
                {"user": "bob", "privileges": []},
            ],
        ))
        apply_databases(recording_session, [database])
        assert recording_provider.statements == [
            'CREATE DATABASE "app_db" OWNER "app_owner" ENCODING \'UTF8\'',
            'GRANT CONNECT ON DATABASE "app_db" TO "alice"',
        ]

    def test_existing_database_still_granted(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.DATABASE, "app_db")])
        database = DatabaseSpec(name="app_db", owner="o", grants=[{"user": "alice", "privileges": ["CONNECT"]}])
        with provider.session() as session:
            apply_databases(session, [database])
        assert provider.statements == ['GRANT CONNECT ON DATABASE "app_db" TO "alice"']

    def test_creation_failure_wrapped(self):
        provider = FailingProvider("ddl")
        with provider.session() as session:
            with pytest.raises(CreationFailure, match="permission denied") as exc_info:
                apply_databases(session, [DatabaseSpec(name="app_db", owner="o")])
        error = exc_info.value
        assert (error.stage, error.object_kind, error.object_name) == ("databases", "database", "app_db")

    def test_grant_failure_names_subject(self):
        provider = FailingProvider("grant")
        database = DatabaseSpec(name="app_db", owner="o", grants=[{"user": "alice", "privileges": ["CONNECT"]}])
        with provider.session() as session:
            with pytest.raises(GrantFailure) as exc_info:
                apply_databases(session, [database])
        assert exc_info.value.subject == "alice"
        assert exc_info.value.object_name == "app_db"
        assert exc_info.value.to_dict()["subject"] == "alice"


class TestExtensions:

    def test_only_absent_extensions_created(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.EXTENSION, "postgis", "gis_db")])
        with provider.session("gis_db") as session:
            apply_extensions(session, ["postgis", "uuid-ossp"])
        assert provider.statements == ['CREATE EXTENSION IF NOT EXISTS "uuid-ossp"']
        assert provider.commands[0].database == "gis_db"

    def test_existence_check_failure_wrapped(self):
        provider = FailingProvider("exists")
        result = BootstrapResult()
        with provider.session("gis_db") as session:
            with pytest.raises(ExistenceCheckFailure, match="catalog unavailable") as exc_info:
                apply_extensions(session, ["postgis"], result)
        assert exc_info.value.stage == "extensions"
        assert exc_info.value.object_name == "postgis"
        assert result.steps[0].status == "failed"
        assert result.steps[0].database == "gis_db"


class TestSchemaTiers:

    def test_single_tier_emits_single_grant(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.SCHEMA, "app", "app_db")])
        with provider.session("app_db") as session:
            apply_schemas(session, [_schema(user="alice", table_privileges=["SELECT"])])
        assert provider.statements == ['GRANT SELECT ON ALL TABLES IN SCHEMA "app" TO "alice"']

    def test_all_tiers_in_fixed_order(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.SCHEMA, "app", "app_db")])
        schema = _schema(
            role="readers",
            privileges=["USAGE"],
            table_privileges=["SELECT"],
            sequence_privileges=["USAGE", "SELECT"],
            function_privileges=["EXECUTE"],
            default_privileges=["SELECT"],
        )
        with provider.session("app_db") as session:
            apply_schemas(session, [schema])
        assert provider.statements == [
            'GRANT USAGE ON SCHEMA "app" TO "readers"',
            'GRANT SELECT ON ALL TABLES IN SCHEMA "app" TO "readers"',
            'GRANT USAGE, SELECT ON ALL SEQUENCES IN SCHEMA "app" TO "readers"',
            'GRANT EXECUTE ON ALL FUNCTIONS IN SCHEMA "app" TO "readers"',
            'ALTER DEFAULT PRIVILEGES FOR ROLE "app_owner" IN SCHEMA "app" GRANT SELECT ON TABLES TO "readers"',
        ]

    def test_grant_with_no_privileges_emits_nothing(self, recording_provider, recording_session):
        apply_schemas(recording_session, [_schema(user="alice")])
        assert recording_provider.statements == ['CREATE SCHEMA "app" AUTHORIZATION "app_owner"']

    def test_schema_created_before_its_grants(self, recording_provider, recording_session):
        apply_schemas(recording_session, [_schema(user="alice", privileges=["USAGE"])])
        assert recording_provider.statements == [
            'CREATE SCHEMA "app" AUTHORIZATION "app_owner"',
            'GRANT USAGE ON SCHEMA "app" TO "alice"',
        ]


class TestInvalidSchemaGrant:

    @pytest.mark.parametrize("subjects,message", [
        ({}, "schema grant must specify either user or role"),
        ({"user": "alice", "role": "readers"}, "schema grant must specify either user or role, not both"),
    ])
    def test_invalid_subject_issues_no_grant(self, subjects, message):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.SCHEMA, "app", "app_db")])
        with provider.session("app_db") as session:
            with pytest.raises(InvalidGrant) as exc_info:
                apply_schemas(session, [_schema(privileges=["USAGE"], **subjects)])
        error = exc_info.value
        assert error.message == message
        assert error.stage == "schemas"
        assert error.object_kind == "schema"
        assert error.object_name == "app"
        assert provider.commands == []

    @pytest.mark.parametrize("subjects", [{}, {"user": "alice", "role": "readers"}])
    def test_absent_schema_not_created(self, recording_provider, recording_session, subjects):
        with pytest.raises(InvalidGrant):
            apply_schemas(recording_session, [_schema(privileges=["USAGE"], **subjects)])
        assert recording_provider.statements == []
        assert recording_provider.created(ObjectKind.SCHEMA) == []

    def test_invalid_grant_blocks_whole_schema(self):
        provider = RecordingConnectionProvider(existing=[(ObjectKind.SCHEMA, "app", "app_db")])
        schema = SchemaSpec.model_validate(make_schema(name="app", owner="o", grants=[
            make_schema_grant(user="alice", privileges=["USAGE"]),
            make_schema_grant(privileges=["USAGE"]),
        ]))
        with provider.session("app_db") as session:
            with pytest.raises(InvalidGrant):
                SchemaProvisioner().apply_schemas(session, [schema])
        assert provider.statements == []

    def test_earlier_schemas_stay_applied(self, recording_provider, recording_session):
        valid = SchemaSpec.model_validate(make_schema(name="first", owner="o", grants=[
            make_schema_grant(user="alice", privileges=["USAGE"]),
        ]))
        invalid = SchemaSpec.model_validate(make_schema(name="second", owner="o", grants=[
            make_schema_grant(privileges=["USAGE"]),
        ]))
        with pytest.raises(InvalidGrant) as exc_info:
            apply_schemas(recording_session, [valid, invalid])
        assert exc_info.value.object_name == "second"
        assert recording_provider.statements == [
            'CREATE SCHEMA "first" AUTHORIZATION "o"',
            'GRANT USAGE ON SCHEMA "first" TO "alice"',
        ]


class TestRegistry:

    def test_every_apply_stage_registered(self):
        assert set(ALL_PROVISIONERS) == {Stage.ROLES, Stage.DATABASES, Stage.EXTENSIONS, Stage.SCHEMAS}

    def test_lookup(self):
        assert get_provisioner(Stage.SCHEMAS) is SchemaProvisioner

    def test_secrets_stage_has_no_provisioner(self):
        with pytest.raises(ValueError, match="No provisioner"):
            get_provisioner(Stage.SECRETS)
