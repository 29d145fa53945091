"""Unit tests for the deferred identify job and backfill."""

from eventrelay.jobs.identify import IDENTIFY_JOB, backfill_identify, enqueue_identify


def test_run_identifies_actor(test_container, fake_transport_factory, actor_lookup):
    test_container.identify_job.run(42)

    payload = fake_transport_factory.latest.get("identify").payload
    assert payload.user_id == "42"
    assert payload.context["ip"] == "203.0.113.7"
    assert actor_lookup.lookups == [42]


def test_run_twice_is_structurally_identical(test_container, fake_transport_factory):
    test_container.identify_job.run(42)
    test_container.identify_job.run(42)

    first, second = (c.payload for c in fake_transport_factory.latest.get_all("identify"))
    assert first.model_dump(exclude={"timestamp"}) == second.model_dump(exclude={"timestamp"})


def test_missing_actor_is_skipped(test_container, fake_transport_factory):
    test_container.identify_job.run(999)
    assert fake_transport_factory.build_count == 0


def test_use_anon_job_matches_request_identity(
    make_settings, lookup_factory, fake_job_queue, fake_transport_factory, actor
):
    from eventrelay.core.container import create_container

    container = create_container(
        make_settings(USER_ID_SOURCE="use_anon"),
        lookup_factory(actor),
        job_queue=fake_job_queue,
        transport_factory=fake_transport_factory,
        register_shutdown=False,
    )
    container.tracker.identify(actor, session={})
    container.identify_job.run(actor.id)

    ids = {c.payload.anonymous_id for c in fake_transport_factory.latest.get_all("identify")}
    assert len(ids) == 1


def test_closed_gate_is_silent_and_does_not_requeue(
    make_settings, lookup_factory, fake_job_queue, fake_transport_factory, actor
):
    from eventrelay.core.container import create_container

    lookup = lookup_factory(actor)
    container = create_container(
        make_settings(ENABLED=False),
        lookup,
        job_queue=fake_job_queue,
        transport_factory=fake_transport_factory,
        register_shutdown=False,
    )
    enqueue_identify(fake_job_queue, actor.id)
    fake_job_queue.run_pending()

    assert fake_transport_factory.build_count == 0
    assert lookup.lookups == []
    assert len(fake_job_queue.enqueued) == 1
    assert fake_job_queue.pending == []


def test_job_registered_under_identify(test_container, fake_job_queue):
    assert IDENTIFY_JOB in fake_job_queue.handlers
    enqueue_identify(fake_job_queue, 42)
    assert fake_job_queue.run_pending() == 1


def test_backfill_enqueues_one_job_per_actor(test_container, fake_job_queue):
    count = backfill_identify([1, 2, 3], fake_job_queue, test_container.dispatcher)

    assert count == 3
    assert [j.args["actor_id"] for j in fake_job_queue.get_all(IDENTIFY_JOB)] == [1, 2, 3]


def test_backfill_disabled_enqueues_nothing(make_settings, fake_job_queue, fake_transport_factory):
    from eventrelay.dispatch.dispatcher import EventDispatcher

    dispatcher = EventDispatcher(make_settings(ENABLED=False), fake_transport_factory)
    assert backfill_identify(iter([1, 2]), fake_job_queue, dispatcher) == 0
    assert fake_job_queue.enqueued == []
