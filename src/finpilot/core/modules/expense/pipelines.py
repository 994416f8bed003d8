"""MongoDB aggregation pipelines for expense summaries."""

from datetime import datetime
from typing import Any
from uuid import UUID


def match_stage(user_id: UUID, start: datetime, end: datetime) -> dict[str, Any]:
    return {"$match": {"user_id": user_id, "date": {"$gte": start, "$lte": end}}}


def _local_day(timezone: str) -> dict[str, Any]:
    return {"$dateToString": {"format": "%Y-%m-%d", "date": "$date", "timezone": timezone}}


def by_category_pipeline(user_id: UUID, start: datetime, end: datetime) -> list[dict[str, Any]]:
    return [
        match_stage(user_id, start, end),
        {"$group": {"_id": "$category", "total": {"$sum": "$amount"}}},
        {"$project": {"_id": 0, "category": "$_id", "total": 1}},
        {"$sort": {"total": -1, "category": 1}},
    ]


def by_day_pipeline(user_id: UUID, start: datetime, end: datetime, timezone: str) -> list[dict[str, Any]]:
    return [
        match_stage(user_id, start, end),
        {"$group": {"_id": _local_day(timezone), "total": {"$sum": "$amount"}}},
        {"$project": {"_id": 0, "date": "$_id", "total": 1}},
        {"$sort": {"date": 1}},
    ]


def by_day_category_pipeline(user_id: UUID, start: datetime, end: datetime, timezone: str) -> list[dict[str, Any]]:
    return [
        match_stage(user_id, start, end),
        {
            "$group": {
                "_id": {"date": _local_day(timezone), "category": "$category"},
                "total": {"$sum": "$amount"},
            }
        },
        {"$project": {"_id": 0, "date": "$_id.date", "category": "$_id.category", "total": 1}},
        {"$sort": {"date": 1, "category": 1}},
    ]
