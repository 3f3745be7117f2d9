from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, registry

table_registry = registry()


@table_registry.mapped_as_dataclass
class User:
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    name: Mapped[str]
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str]
    username: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    profile_picture: Mapped[str] = mapped_column(default="")
    is_verified: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), init=False, server_default=func.now())


@table_registry.mapped_as_dataclass
class VerificationCode:
    __tablename__ = "verification_codes"

    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    code: Mapped[str] = mapped_column(String(12))
    purpose: Mapped[str] = mapped_column(String(32))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


@table_registry.mapped_as_dataclass
class Activity:
    __tablename__ = "activities"
    __table_args__ = (Index("ix_activities_user_timestamp", "user_id", "timestamp"),)

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    activity_type: Mapped[str] = mapped_column(String(32))
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), default=None)
    movie_id: Mapped[Optional[int]] = mapped_column(default=None)
    details: Mapped[Dict[str, Any]] = mapped_column("metadata", JSON, default_factory=dict)


@table_registry.mapped_as_dataclass
class SearchHistory:
    __tablename__ = "search_history"
    __table_args__ = (Index("ix_search_history_count", "search_count", "last_searched"),)

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    query: Mapped[str] = mapped_column(String(255), index=True)
    last_searched: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), default=None)
    search_count: Mapped[int] = mapped_column(default=1)
    movie_ids: Mapped[List[int]] = mapped_column(JSON, default_factory=list)


@table_registry.mapped_as_dataclass
class WatchlistEntry:
    __tablename__ = "watchlist"
    __table_args__ = (UniqueConstraint("user_id", "movie_id"),)

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    movie_id: Mapped[int]
    movie_title: Mapped[str]
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    movie_poster: Mapped[Optional[str]] = mapped_column(default=None)


@table_registry.mapped_as_dataclass
class ViewingHistoryEntry:
    __tablename__ = "viewing_history"
    __table_args__ = (UniqueConstraint("user_id", "movie_id"),)

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    movie_id: Mapped[int]
    movie_title: Mapped[str]
    watched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    movie_poster: Mapped[Optional[str]] = mapped_column(default=None)
    progress: Mapped[int] = mapped_column(default=0)
    completed: Mapped[bool] = mapped_column(default=False)


@table_registry.mapped_as_dataclass
class Movie:
    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500), index=True)
    overview: Mapped[str] = mapped_column(Text, default="")
    genres: Mapped[List[str]] = mapped_column(JSON, default_factory=list)
    genre_ids: Mapped[List[int]] = mapped_column(JSON, default_factory=list)
    popularity: Mapped[float] = mapped_column(default=0.0)
    rating: Mapped[float] = mapped_column(default=0.0)
    release_date: Mapped[Optional[date]] = mapped_column(default=None)
    poster_url: Mapped[Optional[str]] = mapped_column(default=None)
    backdrop_url: Mapped[Optional[str]] = mapped_column(default=None)


@table_registry.mapped_as_dataclass
class SubscriptionPlan:
    __tablename__ = "subscription_plans"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    price: Mapped[float]
    duration_days: Mapped[int]
    features: Mapped[List[str]] = mapped_column(JSON, default_factory=list)
    max_resolution: Mapped[str] = mapped_column(default="480p")
    can_download: Mapped[bool] = mapped_column(default=False)
    ads_enabled: Mapped[bool] = mapped_column(default=True)
    status: Mapped[str] = mapped_column(default="active")


@table_registry.mapped_as_dataclass
class UserSubscription:
    __tablename__ = "user_subscriptions"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("subscription_plans.id"))
    plan_name: Mapped[str]
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(default="active")
    auto_renew: Mapped[bool] = mapped_column(default=False)
    payment_id: Mapped[Optional[str]] = mapped_column(default=None)
    order_id: Mapped[Optional[str]] = mapped_column(default=None)


@table_registry.mapped_as_dataclass
class MoviePurchase:
    __tablename__ = "movie_purchases"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    movie_id: Mapped[int]
    movie_title: Mapped[str]
    price: Mapped[float]
    purchase_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    expiry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    payment_id: Mapped[str]
    order_id: Mapped[str]
    status: Mapped[str] = mapped_column(default="active")


@table_registry.mapped_as_dataclass
class Transaction:
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    type: Mapped[str] = mapped_column(String(32))
    amount: Mapped[float]
    payment_id: Mapped[str]
    order_id: Mapped[str]
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    currency: Mapped[str] = mapped_column(default="INR")
    payment_method: Mapped[str] = mapped_column(default="card")
    status: Mapped[str] = mapped_column(default="success")
    item_id: Mapped[Optional[str]] = mapped_column(default=None)
    item_name: Mapped[Optional[str]] = mapped_column(default=None)
    gateway: Mapped[str] = mapped_column(default="razorpay")
    details: Mapped[Dict[str, Any]] = mapped_column("metadata", JSON, default_factory=dict)


@table_registry.mapped_as_dataclass
class Comment:
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    movie_id: Mapped[int] = mapped_column(index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    username: Mapped[str]
    comment: Mapped[str] = mapped_column(Text)
    user_profile_picture: Mapped[str] = mapped_column(default="")
    likes: Mapped[int] = mapped_column(default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), init=False, server_default=func.now())


@table_registry.mapped_as_dataclass
class MovieLike:
    __tablename__ = "movie_likes"
    __table_args__ = (UniqueConstraint("movie_id", "user_id"),)

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    movie_id: Mapped[int] = mapped_column(index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), init=False, server_default=func.now())


@table_registry.mapped_as_dataclass
class MovieShare:
    __tablename__ = "movie_shares"

    id: Mapped[int] = mapped_column(init=False, primary_key=True)
    movie_id: Mapped[int] = mapped_column(index=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), default=None)
    platform: Mapped[str] = mapped_column(default="other")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), init=False, server_default=func.now())
