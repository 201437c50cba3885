import pytest

from pubsub_model.models import NotificationRecord
from pubsub_model.proxy import PublisherProxy
from pubsub_model.publisher import Publisher
from pubsub_model.publisher_subscriber import PublisherSubscriber
from pubsub_model.subscriber import Subscriber


def test_roles_share_the_id():
    node = PublisherSubscriber("node")
    assert node.get_id() == "node"
    assert node.as_publisher.get_id() == "node"
    assert node.as_subscriber.get_id() == "node"
    assert node.is_id("node")


def test_counts_are_kept_per_role():
    left = PublisherSubscriber("left")
    right = PublisherSubscriber("right")
    left.subscribe(right, "ping", lambda p: None)
    left.subscribe(right, "pong", lambda p: None)

    assert left.get_nb_subscriptions_as_subscriber() == 2
    assert left.get_nb_subscriptions_as_publisher() == 0
    assert right.get_nb_subscriptions_as_publisher() == 2
    assert right.get_nb_subscriptions_as_subscriber() == 0


def test_bare_count_is_deprecated_and_means_subscriber():
    left = PublisherSubscriber("left")
    right = PublisherSubscriber("right")
    left.subscribe(right, "ping", lambda p: None)

    with pytest.deprecated_call():
        assert left.get_nb_subscriptions() == 1
    with pytest.deprecated_call():
        assert right.get_nb_subscriptions() == 0


def test_publish_between_nodes():
    left = PublisherSubscriber("left")
    right = PublisherSubscriber("right")
    got = []
    left.subscribe(right, "ping", got.append)

    right.publish("ping", {"n": 1})
    assert got == [{"n": 1}]
    assert right.find_subscription_by_subscriber_id("left")[0].publisher_id == "right"


def test_self_subscription():
    node = PublisherSubscriber("node")
    got = []
    s = node.subscribe(node, "loop", got.append)

    node.publish("loop", 7)
    assert got == [7]
    assert s.subscriber_id == s.publisher_id == "node"

    node.unsubscribe_from_subscription_id(s.id)
    assert node.get_nb_subscriptions_as_publisher() == 0
    assert node.get_nb_subscriptions_as_subscriber() == 0


def test_wait_until_through_composition():
    node = PublisherSubscriber("node")
    source = Publisher("source")
    handle = node.wait_until([NotificationRecord(source, "done")])
    source.publish("done", "ok")
    assert handle.result() == ["ok"]


def test_destroy_clears_both_roles():
    node = PublisherSubscriber("node")
    upstream = Publisher("upstream")
    downstream = PublisherSubscriber("downstream")
    node.subscribe(upstream, "tick", lambda p: None)
    downstream.subscribe(node, "tock", lambda p: None)

    node.destroy()

    assert node.get_nb_subscriptions_as_publisher() == 0
    assert node.get_nb_subscriptions_as_subscriber() == 0
    assert upstream.get_nb_subscriptions() == 0
    assert downstream.get_nb_subscriptions_as_subscriber() == 0


def test_exception_policy_delegates_to_publisher():
    node = PublisherSubscriber("node")
    listener = PublisherSubscriber("listener")

    def explode(payload):
        raise RuntimeError("boom")

    listener.subscribe(node, "tick", explode)
    node.stop_publication_on_exception()
    with pytest.raises(RuntimeError):
        node.publish("tick")
    node.continue_publication_on_exception()
    node.publish("tick")


def test_proxy_republishes_with_hook():
    source = Publisher("source")
    proxy = PublisherProxy("proxy")
    listener = PublisherSubscriber("listener")
    got = []
    listener.subscribe(proxy, "price", got.append)

    assert proxy.add_proxy(source, "price", lambda p: p * 2) is proxy
    source.publish("price", 21)
    assert got == [42]

    proxy.remove_proxy(source, "price")
    source.publish("price", 1)
    assert got == [42]
    assert source.get_nb_subscriptions() == 0


def test_proxy_without_hook_passes_payload_through():
    source = Publisher("source")
    proxy = PublisherProxy("proxy").add_proxy(source, "event")
    got = []
    PublisherSubscriber("listener").subscribe(proxy, "event", got.append)

    payload = object()
    source.publish("event", payload)
    assert got == [payload]


def test_equality_goes_by_id_across_roles():
    node = PublisherSubscriber("node")
    assert node == node.as_publisher
    assert node == node.as_subscriber
    assert node.as_publisher == node.as_subscriber
    assert Publisher("x") == Subscriber("x")
    assert Publisher("x") != Publisher("y")
    assert len({node, node.as_publisher, node.as_subscriber}) == 1


def test_subscription_never_equals_an_entity():
    node = PublisherSubscriber("node")
    s = node.subscribe(Publisher("pub"), "tick", lambda p: None)
    twin = Publisher(s.id)
    assert s != twin
    assert twin != s
    assert s == node.find_subscription_by_id(s.id)
