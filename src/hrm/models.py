"""HRM (Human Resource Management) models."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------

class Employee(TimeStampedModel):
    """Fiche employe. Jamais supprimee : ``is_active`` sert de suppression logique."""

    employee_code = models.CharField(
        "matricule",
        max_length=30,
        unique=True,
    )
    first_name = models.CharField("prenom", max_length=150)
    last_name = models.CharField("nom", max_length=150, blank=True, default="")
    email = models.EmailField("e-mail", blank=True, default="", db_index=True)
    phone = models.CharField("telephone", max_length=30, blank=True, default="")
    designation = models.CharField("fonction", max_length=150, blank=True, default="")
    department = models.CharField("departement", max_length=150, blank=True, default="", db_index=True)
    salary = models.DecimalField(
        "salaire annuel",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    joining_date = models.DateField("date d'embauche", null=True, blank=True)
    photo = models.ImageField("photo", upload_to="hrm/employees/", blank=True)

    # Informations personnelles
    date_of_birth = models.DateField("date de naissance", null=True, blank=True)
    wedding_anniversary = models.DateField("anniversaire de mariage", null=True, blank=True)

    # Identification
    pan = models.CharField("numero PAN", max_length=20, blank=True, default="")
    aadhar = models.CharField("numero Aadhaar", max_length=20, blank=True, default="")
    passport = models.CharField("numero de passeport", max_length=30, blank=True, default="")

    # Banque
    bank_name = models.CharField("banque", max_length=100, blank=True, default="")
    bank_account = models.CharField("numero de compte", max_length=50, blank=True, default="")
    bank_ifsc = models.CharField("code IFSC", max_length=20, blank=True, default="")

    emergency_contact = models.CharField("contact d'urgence", max_length=200, blank=True, default="")

    # Emploi
    probation_period_months = models.PositiveSmallIntegerField(
        "periode d'essai (mois)", null=True, blank=True
    )
    confirmation_date = models.DateField("date de titularisation", null=True, blank=True)

    address_permanent = models.TextField("adresse permanente", blank=True, default="")
    address_current = models.TextField("adresse actuelle", blank=True, default="")

    is_active = models.BooleanField("actif", default=True, db_index=True)

    class Meta:
        verbose_name = "employe"
        ordering = ["first_name", "last_name"]

    def __str__(self):
        return f"{self.full_name} ({self.employee_code})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

class AttendanceRecord(TimeStampedModel):
    """Pointage journalier : une ligne par employe et par jour."""

    class Status(models.TextChoices):
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        LEAVE = "leave", "Leave"

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="attendance_records",
        verbose_name="employe",
    )
    date = models.DateField("date", db_index=True)
    status = models.CharField(
        "statut",
        max_length=10,
        choices=Status.choices,
        db_index=True,
    )
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attendance_marked",
        verbose_name="saisi par",
    )

    class Meta:
        verbose_name = "pointage"
        ordering = ["-date", "employee__first_name"]
        constraints = [
            models.UniqueConstraint(fields=["employee", "date"], name="uniq_attendance_employee_date"),
        ]

    def __str__(self):
        return f"{self.employee} {self.date} {self.status}"


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

class LeaveRequest(TimeStampedModel):
    """Demande de conge soumise par un employe."""

    class LeaveType(models.TextChoices):
        SICK = "sick", "Sick Leave"
        CASUAL = "casual", "Casual Leave"
        ANNUAL = "annual", "Annual Leave"
        MATERNITY = "maternity", "Maternity Leave"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="leave_requests",
        verbose_name="employe",
    )
    leave_type = models.CharField(
        "type de conge",
        max_length=20,
        choices=LeaveType.choices,
        default=LeaveType.SICK,
    )
    start_date = models.DateField("date de debut")
    end_date = models.DateField("date de fin")
    reason = models.TextField("motif", blank=True, default="")
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="leave_reviews",
        verbose_name="revue par",
    )
    reviewed_at = models.DateTimeField("date de revue", null=True, blank=True)
    review_comment = models.TextField("commentaire de revue", blank=True, default="")

    class Meta:
        verbose_name = "demande de conge"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.employee} - {self.get_leave_type_display()} ({self.start_date} → {self.end_date})"

    @property
    def days(self):
        return (self.end_date - self.start_date).days + 1


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]

RATING_FIELDS = (
    "technical_skills",
    "communication",
    "teamwork",
    "leadership",
    "problem_solving",
    "attendance_punctuality",
    "goals_achievement",
)


class PerformanceReview(TimeStampedModel):
    """Evaluation de performance d'un employe pour une periode."""

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="performance_reviews",
        verbose_name="employe",
    )
    reviewer = models.ForeignKey(
        Employee,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviews_given",
        verbose_name="evaluateur",
    )
    review_period_start = models.DateField("debut de periode")
    review_period_end = models.DateField("fin de periode")

    technical_skills = models.PositiveSmallIntegerField("competences techniques", default=3, validators=RATING_VALIDATORS)
    communication = models.PositiveSmallIntegerField("communication", default=3, validators=RATING_VALIDATORS)
    teamwork = models.PositiveSmallIntegerField("travail d'equipe", default=3, validators=RATING_VALIDATORS)
    leadership = models.PositiveSmallIntegerField("leadership", default=3, validators=RATING_VALIDATORS)
    problem_solving = models.PositiveSmallIntegerField("resolution de problemes", default=3, validators=RATING_VALIDATORS)
    attendance_punctuality = models.PositiveSmallIntegerField("assiduite", default=3, validators=RATING_VALIDATORS)
    goals_achievement = models.PositiveSmallIntegerField("atteinte des objectifs", default=3, validators=RATING_VALIDATORS)

    overall_rating = models.DecimalField(
        "note globale",
        max_digits=3,
        decimal_places=1,
        default=Decimal("3.0"),
    )
    comments = models.TextField("commentaires", blank=True, default="")
    strengths = models.TextField("points forts", blank=True, default="")
    improvement_areas = models.TextField("axes d'amelioration", blank=True, default="")
    goals_next_period = models.TextField("objectifs periode suivante", blank=True, default="")

    class Meta:
        verbose_name = "evaluation de performance"
        ordering = ["-review_period_end", "-created_at"]

    def __str__(self):
        return f"{self.employee} - {self.review_period_start} / {self.review_period_end}"

    def calculated_rating(self):
        """Mean of the seven criteria, rounded to one decimal."""
        values = [getattr(self, name) for name in RATING_FIELDS]
        return (Decimal(sum(values)) / Decimal(len(values))).quantize(Decimal("0.1"))

    def save(self, *args, **kwargs):
        self.overall_rating = self.calculated_rating()
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Exit formalities
# ---------------------------------------------------------------------------

CLEARANCE_FIELDS = (
    "it_clearance",
    "hr_clearance",
    "finance_clearance",
    "admin_clearance",
    "project_handover",
    "asset_return",
    "knowledge_transfer",
    "exit_interview",
)


def _money(label):
    return models.DecimalField(
        label,
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )


class ExitFormality(TimeStampedModel):
    """Dossier de depart : checklist de validations et solde de tout compte."""

    class ExitReason(models.TextChoices):
        RESIGNATION = "resignation", "Resignation"
        TERMINATION = "termination", "Termination"
        RETIREMENT = "retirement", "Retirement"
        CONTRACT_END = "contract_end", "Contract End"
        MUTUAL_SEPARATION = "mutual_separation", "Mutual Separation"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In Progress"
        REJECTED = "rejected", "Rejected"
        COMPLETED = "completed", "Completed"

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="exit_formalities",
        verbose_name="employe",
    )
    resignation_date = models.DateField("date de demission")
    last_working_day = models.DateField("dernier jour travaille")
    exit_reason = models.CharField(
        "motif de depart",
        max_length=30,
        choices=ExitReason.choices,
        default=ExitReason.RESIGNATION,
    )
    reason_details = models.TextField("details du motif", blank=True, default="")
    notice_period_days = models.PositiveIntegerField("preavis (jours)", default=30)
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    it_clearance = models.BooleanField("validation IT", default=False)
    hr_clearance = models.BooleanField("validation RH", default=False)
    finance_clearance = models.BooleanField("validation finance", default=False)
    admin_clearance = models.BooleanField("validation administration", default=False)
    project_handover = models.BooleanField("passation des projets", default=False)
    asset_return = models.BooleanField("restitution du materiel", default=False)
    knowledge_transfer = models.BooleanField("transfert de connaissances", default=False)
    exit_interview = models.BooleanField("entretien de sortie", default=False)

    pending_salary = _money("salaire restant du")
    bonus_amount = _money("prime")
    leave_encashment = _money("indemnite de conges")
    gratuity_amount = _money("gratification")
    deductions = _money("retenues")

    notes = models.TextField("notes", blank=True, default="")
    completed_at = models.DateTimeField("termine le", null=True, blank=True)

    class Meta:
        verbose_name = "formalite de depart"
        verbose_name_plural = "formalites de depart"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.employee} - {self.get_status_display()}"

    @property
    def clearances(self):
        return {name: getattr(self, name) for name in CLEARANCE_FIELDS}

    @property
    def clearance_progress(self):
        """Percentage of completed clearance items (0-100, integer)."""
        done = sum(1 for value in self.clearances.values() if value)
        return round(done / len(CLEARANCE_FIELDS) * 100)

    @property
    def all_cleared(self):
        return all(self.clearances.values())

    @property
    def settlement_total(self):
        return (
            self.pending_salary
            + self.bonus_amount
            + self.leave_encashment
            + self.gratuity_amount
            - self.deductions
        )

    @property
    def is_closed(self):
        return self.status in (self.Status.COMPLETED, self.Status.REJECTED)
