from django.contrib import admin

from .models import Document, PlagiarismResult


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ('filename', 'user', 'file_size', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('filename', 'user__username', 'user__email')


@admin.register(PlagiarismResult)
class PlagiarismResultAdmin(admin.ModelAdmin):
    list_display = ('document', 'plagiarism_score', 'created_at')
    readonly_fields = ('sources_found', 'details')
