# detector/urls.py
from django.urls import path
from .views import DocumentListAPIView, DocumentDetailAPIView, AnalysisProgressAPIView, PlagiarismResultAPIView

app_name = "detector"

urlpatterns = [
    path('documents/', DocumentListAPIView.as_view(), name='document_list'),
    path('documents/<uuid:document_id>/', DocumentDetailAPIView.as_view(), name='document_detail'),
    path('documents/<uuid:document_id>/progress/', AnalysisProgressAPIView.as_view(), name='analysis_progress'),
    path('documents/<uuid:document_id>/result/', PlagiarismResultAPIView.as_view(), name='plagiarism_result'),
]
