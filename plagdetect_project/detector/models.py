# detector/models.py
import uuid

from django.conf import settings
from django.db import models


class Document(models.Model):
    """An uploaded PDF together with the text extracted from it."""
    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='documents')
    filename = models.CharField(max_length=255)
    file_size = models.PositiveBigIntegerField(default=0)
    content = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    analysis_started_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.filename} ({self.status})"

    @property
    def is_completed(self):
        return self.status == self.STATUS_COMPLETED


class PlagiarismResult(models.Model):
    """Outcome of the simulated analysis of a document."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    document = models.OneToOneField(Document, on_delete=models.CASCADE, related_name='plagiarism_result')
    plagiarism_score = models.PositiveSmallIntegerField()
    sources_found = models.JSONField(default=list, blank=True)  # [{url, title, similarity, excerpt}]
    details = models.JSONField(default=dict, blank=True)  # {total_words, unique_content, analysis_date}
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.plagiarism_score}% for {self.document.filename}"

    @property
    def unique_content(self):
        return self.details.get('unique_content', 100 - self.plagiarism_score)

    @property
    def sources_count(self):
        return len(self.sources_found)
