from __future__ import annotations

import datetime as dt

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Athlete(Base):
    __tablename__ = "athletes"
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(80))
    last_name: Mapped[str] = mapped_column(String(80))
    email: Mapped[str] = mapped_column(String(200), unique=True)
    weekly_goal_km: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)


class CompletedWorkout(Base):
    __tablename__ = "completed_workouts"
    id: Mapped[int] = mapped_column(primary_key=True)
    athlete_id: Mapped[str] = mapped_column(ForeignKey("athletes.id"), index=True)
    completed_at: Mapped[dt.datetime] = mapped_column(DateTime)
    label: Mapped[str | None] = mapped_column(String(20))
    avg_heart_rate: Mapped[float | None] = mapped_column(Float)
    actual_distance: Mapped[float | None] = mapped_column(Float)  # meters
    actual_duration: Mapped[float | None] = mapped_column(Float)  # seconds
    __table_args__ = (
        Index("ix_completed_workouts_athlete_recent", "athlete_id", "completed_at"),
    )


class TrainingPlan(Base):
    __tablename__ = "training_plans"
    id: Mapped[int] = mapped_column(primary_key=True)
    athlete_id: Mapped[str] = mapped_column(ForeignKey("athletes.id"), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    title: Mapped[str] = mapped_column(String(160))
    description: Mapped[str | None] = mapped_column(Text)
    estimated_distance: Mapped[int | None] = mapped_column(Integer)
    blocks: Mapped[list["TrainingBlock"]] = relationship(
        back_populates="plan", order_by="TrainingBlock.order", cascade="all, delete-orphan"
    )


class TrainingBlock(Base):
    __tablename__ = "training_blocks"
    id: Mapped[int] = mapped_column(primary_key=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("training_plans.id"), index=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    type: Mapped[str] = mapped_column(String(20), default="RUN")
    duration_seconds: Mapped[int | None] = mapped_column(Integer)
    distance_meters: Mapped[float | None] = mapped_column(Float)
    repetitions: Mapped[int | None] = mapped_column(Integer)
    rest_seconds: Mapped[int | None] = mapped_column(Integer)
    pace_min: Mapped[float | None] = mapped_column(Float)  # sec/km
    pace_max: Mapped[float | None] = mapped_column(Float)
    hr_min: Mapped[int | None] = mapped_column(Integer)  # bpm
    hr_max: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    plan: Mapped[TrainingPlan] = relationship(back_populates="blocks")
    __table_args__ = (
        CheckConstraint("type in ('WARMUP', 'RUN', 'INTERVALS', 'REST', 'COOLDOWN')"),
    )
