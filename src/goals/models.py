"""Goals and KPIs tracked per employee."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


def progress_percentage(current, target):
    """``current / target`` as a percentage clamped to [0, 100]; 0 without a target."""
    if not target or target <= 0:
        return 0.0
    pct = float(current or 0) / float(target) * 100
    return max(0.0, min(pct, 100.0))


class TrackedTarget(TimeStampedModel):
    """Common fields of goals and KPIs."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"
        PAUSED = "paused", "Paused"
        CANCELLED = "cancelled", "Cancelled"

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        verbose_name="employe",
    )
    title = models.CharField("intitule", max_length=200)
    description = models.TextField("description", blank=True, default="")
    category = models.CharField("categorie", max_length=100, blank=True, default="")
    current_value = models.DecimalField(
        "valeur actuelle",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    target_value = models.DecimalField(
        "valeur cible",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    unit = models.CharField("unite", max_length=30, blank=True, default="")
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    start_date = models.DateField("date de debut", null=True, blank=True)
    end_date = models.DateField("date de fin", null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} ({self.employee})"

    @property
    def progress(self):
        return progress_percentage(self.current_value, self.target_value)


class Goal(TrackedTarget):
    """Objectif individuel."""

    class Meta(TrackedTarget.Meta):
        verbose_name = "objectif"


class KPI(TrackedTarget):
    """Indicateur de performance mesure periodiquement."""

    class Frequency(models.TextChoices):
        MONTHLY = "monthly", "Monthly"
        QUARTERLY = "quarterly", "Quarterly"
        YEARLY = "yearly", "Yearly"

    frequency = models.CharField(
        "frequence",
        max_length=20,
        choices=Frequency.choices,
        default=Frequency.MONTHLY,
    )

    class Meta(TrackedTarget.Meta):
        verbose_name = "KPI"
        verbose_name_plural = "KPIs"
