from django.db import models


class DocumentType(models.TextChoices):
    ONSITE = 'ONSITE', 'Onsite'
    OFFSITE = 'OFFSITE', 'Offsite'
    MIXED = 'MIXED', 'Mixed'
