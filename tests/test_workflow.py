import pytest

from conftest import RecordingSink, StaticProbe
from machine_enroll.exceptions import ProbeException
from machine_enroll.interfaces import ConnectionProbe
from machine_enroll.models import (
    CommitStatus,
    CredentialEntry,
    FailureReason,
    NoticeChoice,
    NoticeKind,
    TestOutcome,
)
from machine_enroll.workflow import ConnectionWorkflow


@pytest.fixture()
def draft():
    return CredentialEntry(host=" db1.example.com ", user=" DOMAIN\\bob ", password="s3cret")


@pytest.fixture()
def workflow(registry, probe, sink, protector):
    return ConnectionWorkflow(registry, probe, sink, protector)


class FailingProbe(ConnectionProbe):
    def test(self, host, user, password, force_refresh):
        raise ProbeException("RPC server unavailable")


class TestRequestTest:
    def test_success_delegates_to_probe(self, workflow, probe, sink, draft):
        assert workflow.request_test(draft, entries_valid=True) == TestOutcome.SUCCESS
        assert probe.calls == [("db1.example.com", "DOMAIN\\bob", "s3cret", True)]
        assert sink.kinds == [NoticeKind.INFO]
        assert not workflow.busy

    def test_failure(self, registry, sink, protector, draft):
        probe = StaticProbe(online=False)
        workflow = ConnectionWorkflow(registry, probe, sink, protector)
        assert workflow.request_test(draft, entries_valid=True) == TestOutcome.FAILURE
        assert sink.notices == []

    def test_refused_when_entries_invalid(self, workflow, probe, sink, draft):
        assert workflow.request_test(draft, entries_valid=False) == TestOutcome.FAILURE
        assert probe.calls == []
        assert sink.notices == []

    def test_probe_exception_is_not_online(self, registry, sink, protector, draft):
        workflow = ConnectionWorkflow(registry, FailingProbe(), sink, protector)
        assert workflow.request_test(draft, entries_valid=True) == TestOutcome.FAILURE
        assert not workflow.busy

    def test_always_probes_even_in_edit_mode(self, registry, probe, sink, protector, draft):
        workflow = ConnectionWorkflow(registry, probe, sink, protector, edit_mode=True)
        workflow.request_test(draft, entries_valid=True)
        workflow.request_test(draft, entries_valid=True)
        assert len(probe.calls) == 2


class TestRequestCommit:
    def test_commit_writes_trimmed_and_protected_entry(
        self, workflow, probe, protector, draft, registry
    ):
        outcome = workflow.request_commit(draft, entries_valid=True)

        assert outcome.status == CommitStatus.COMMITTED
        assert outcome.committed
        assert outcome.entry.host == "db1.example.com"
        assert outcome.entry.user == "DOMAIN\\bob"
        assert outcome.entry.password != "s3cret"
        assert protector.unprotect(outcome.entry.password) == "s3cret"
        assert len(probe.calls) == 1
        # persisting is the caller's job
        assert registry.entries() == []

    def test_refused_when_entries_invalid(self, workflow, probe, draft):
        outcome = workflow.request_commit(draft, entries_valid=False)
        assert outcome.status == CommitStatus.FAILURE
        assert outcome.reason == FailureReason.ENTRIES_INVALID
        assert probe.calls == []

    def test_not_online_without_existing_entry_fails(self, registry, sink, protector, draft):
        workflow = ConnectionWorkflow(registry, StaticProbe(online=False), sink, protector)
        outcome = workflow.request_commit(draft, entries_valid=True)
        assert outcome.status == CommitStatus.FAILURE
        assert outcome.reason == FailureReason.NOT_ONLINE
        assert sink.notices == []

    def test_edit_mode_trusts_known_online_status(self, registry, probe, sink, protector, draft):
        workflow = ConnectionWorkflow(registry, probe, sink, protector, edit_mode=True)
        outcome = workflow.request_commit(draft, entries_valid=True, known_online=True)
        assert outcome.status == CommitStatus.COMMITTED
        assert probe.calls == []

    def test_edit_mode_known_offline_fails_without_probe(
        self, registry, probe, sink, protector, draft
    ):
        workflow = ConnectionWorkflow(registry, probe, sink, protector, edit_mode=True)
        outcome = workflow.request_commit(draft, entries_valid=True, known_online=False)
        assert outcome.reason == FailureReason.NOT_ONLINE
        assert probe.calls == []

    def test_edit_mode_force_retest(self, registry, probe, sink, protector, draft):
        workflow = ConnectionWorkflow(registry, probe, sink, protector, edit_mode=True)
        outcome = workflow.request_commit(
            draft, entries_valid=True, known_online=False, force_retest=True
        )
        assert outcome.status == CommitStatus.COMMITTED
        assert len(probe.calls) == 1


class TestOverwrite:
    @pytest.fixture()
    def existing(self, registry):
        return registry.add(CredentialEntry(host="DB1.example.com", user="old", password="old"))

    def test_declining_overwrite_aborts(self, registry, protector, existing, draft):
        sink = RecordingSink(answer=NoticeChoice.NO)
        workflow = ConnectionWorkflow(registry, StaticProbe(online=False), sink, protector)

        outcome = workflow.request_commit(draft, entries_valid=True)

        assert outcome.status == CommitStatus.ABORTED
        assert outcome.reason == FailureReason.OVERWRITE_DECLINED
        assert outcome.entry is None
        assert registry.entries() == [existing]
        assert sink.notices[0][0] == NoticeKind.WARNING
        assert sink.notices[0][3] is True

    def test_accepting_overwrite_replaces_entry(self, registry, protector, existing, draft):
        sink = RecordingSink(answer=NoticeChoice.YES)
        probe = StaticProbe(online=False)
        workflow = ConnectionWorkflow(registry, probe, sink, protector)

        outcome = workflow.request_commit(draft, entries_valid=True)

        # the host stays offline, so the replacement is stored but not committed
        assert outcome.status == CommitStatus.FAILURE
        assert outcome.stored
        [stored] = registry.entries()
        assert stored.host == "db1.example.com"
        assert stored.user == "DOMAIN\\bob"
        assert protector.unprotect(stored.password) == "s3cret"
        assert [call[3] for call in probe.calls] == [True, False]

    def test_accepted_overwrite_commits_when_host_answers(
        self, registry, protector, existing, draft
    ):
        class RecoveringProbe(StaticProbe):
            def test(self, host, user, password, force_refresh):
                result = super().test(host, user, password, force_refresh)
                self.online = True
                return result

        sink = RecordingSink(answer=NoticeChoice.YES)
        workflow = ConnectionWorkflow(registry, RecoveringProbe(online=False), sink, protector)

        outcome = workflow.request_commit(draft, entries_valid=True)

        assert outcome.status == CommitStatus.COMMITTED
        assert outcome.stored
        assert registry.entries() == [outcome.entry]

    def test_no_overwrite_offer_when_online(self, workflow, sink, existing, draft, registry):
        outcome = workflow.request_commit(draft, entries_valid=True)
        assert outcome.status == CommitStatus.COMMITTED
        assert not outcome.stored
        assert sink.notices == []
        assert registry.entries() == [existing]

    def test_no_overwrite_offer_in_edit_mode(self, registry, protector, existing, draft):
        sink = RecordingSink(answer=NoticeChoice.YES)
        workflow = ConnectionWorkflow(
            registry, StaticProbe(online=False), sink, protector, edit_mode=True
        )
        outcome = workflow.request_commit(draft, entries_valid=True, force_retest=True)
        assert outcome.reason == FailureReason.NOT_ONLINE
        assert sink.notices == []
