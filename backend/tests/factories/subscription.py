"""Factory Boy definition for subscription edges."""

from __future__ import annotations

import factory
from channelhub.models.subscription import Subscription

from tests.factories import BaseFactory
from tests.factories.account import AccountFactory


class SubscriptionFactory(BaseFactory):
    """Build ``subscriber -> channel`` edges between persisted accounts."""

    class Meta:
        model = Subscription

    subscriber_id = factory.LazyFunction(lambda: AccountFactory().id)
    channel_id = factory.LazyFunction(lambda: AccountFactory().id)
