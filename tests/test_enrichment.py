import threading

import pytest

from org_finder.core.enrichment import CancellationToken, enrich_contact_pages
from org_finder.core.errors import DiscoveryError
from org_finder.models import OrganizationRecord


class FakeFinder:
    def __init__(self, answers):
        self.answers = answers
        self.calls = []
        self._lock = threading.Lock()

    def find(self, website):
        with self._lock:
            self.calls.append(website)
        answer = self.answers.get(website, "")
        if isinstance(answer, Exception):
            raise answer
        return answer


def _org(name, website="", email=""):
    return OrganizationRecord(name=name, website=website, email=email)


def test_only_website_only_records_are_discovered():
    orgs = [
        _org("Has Email", website="https://a.org", email="a@a.org"),
        _org("Website Only", website="https://b.org"),
        _org("Nothing"),
    ]
    finder = FakeFinder({"https://b.org": "https://b.org/contact"})

    report = enrich_contact_pages(orgs, finder, batch_size=5, batch_delay=0, sleep=lambda _: None)

    assert finder.calls == ["https://b.org"]
    assert orgs[1].contact_page == "https://b.org/contact"
    assert orgs[0].contact_page == ""
    assert report.found == 1
    assert report.batches == 1


def test_failures_do_not_abort_batch_and_are_reported():
    orgs = [_org(f"Org {i}", website=f"https://org{i}.org") for i in range(7)]
    answers = {f"https://org{i}.org": f"https://org{i}.org/contact" for i in range(7)}
    answers["https://org1.org"] = DiscoveryError("timeout")
    answers["https://org4.org"] = RuntimeError("parser exploded")
    answers["https://org5.org"] = ""
    finder = FakeFinder(answers)
    sleeps = []

    report = enrich_contact_pages(orgs, finder, batch_size=3, batch_delay=0.25, sleep=sleeps.append)

    assert report.batches == 3
    assert sleeps == [0.25, 0.25]
    assert report.failed == 2
    assert report.not_found == 1
    assert report.found == 4
    assert orgs[1].contact_page == ""
    assert orgs[4].contact_page == ""
    assert orgs[6].contact_page == "https://org6.org/contact"
    assert isinstance(report.outcomes[4].error, DiscoveryError)
    assert report.summary()["attempted"] == 7


def test_cancelled_token_stops_batches_and_mutation():
    orgs = [_org(f"Org {i}", website=f"https://org{i}.org") for i in range(4)]
    token = CancellationToken()

    class CancellingFinder(FakeFinder):
        def find(self, website):
            token.cancel()
            return website + "/contact"

    finder = CancellingFinder({})
    report = enrich_contact_pages(orgs, finder, batch_size=2, batch_delay=0, token=token, sleep=lambda _: None)

    assert report.cancelled is True
    assert report.batches == 1
    assert all(org.contact_page == "" for org in orgs)


def test_already_cancelled_token_does_nothing():
    token = CancellationToken()
    token.cancel()
    orgs = [_org("Org", website="https://org.org")]
    finder = FakeFinder({})
    report = enrich_contact_pages(orgs, finder, token=token, sleep=lambda _: None)
    assert finder.calls == []
    assert report.cancelled is True


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        enrich_contact_pages([], FakeFinder({}), batch_size=0)


def test_contact_page_assigned_once():
    org = _org("Org", website="https://org.org")
    org.assign_contact_page("https://org.org/contact")
    with pytest.raises(ValueError):
        org.assign_contact_page("https://org.org/about")
    assert org.needs_contact_discovery is False
