from rest_framework import serializers

from .models import Document, PlagiarismResult
from .scoring import score_tier


class DocumentSerializer(serializers.ModelSerializer):
    has_result = serializers.SerializerMethodField()

    class Meta:
        model = Document
        fields = ('id', 'filename', 'file_size', 'status', 'created_at', 'analysis_started_at', 'has_result')
        read_only_fields = fields

    def get_has_result(self, obj):
        # no query when the result was loaded with select_related('plagiarism_result')
        return hasattr(obj, 'plagiarism_result')


class PlagiarismResultSerializer(serializers.ModelSerializer):
    document_id = serializers.UUIDField(source='document.id', read_only=True)
    tier = serializers.SerializerMethodField()

    class Meta:
        model = PlagiarismResult
        fields = ('id', 'document_id', 'plagiarism_score', 'sources_found', 'details', 'tier', 'created_at')
        read_only_fields = fields

    def get_tier(self, obj):
        tier = score_tier(obj.plagiarism_score)
        return {'label': tier.label, 'color': tier.color}
