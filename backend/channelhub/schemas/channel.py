"""Channel and watch-history schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    """A channel with subscription counts relative to the viewer."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(required=True, data_key="fullName")
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(required=True, data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(
        required=True, data_key="channelsSubscribedToCount"
    )
    is_subscribed = fields.Boolean(required=True, data_key="isSubscribed")


class VideoOwnerSchema(Schema):
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    avatar = fields.String()


class WatchedVideoSchema(Schema):
    """A watched video with its owner flattened into one object."""

    id = fields.String(required=True)
    video_file = fields.String(data_key="videoFile")
    thumbnail = fields.String()
    title = fields.String()
    description = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    owner = fields.Nested(VideoOwnerSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
