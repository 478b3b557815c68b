from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .analysis import AnalysisTimeline
from .models import Document, PlagiarismResult
from .serializers import DocumentSerializer, PlagiarismResultSerializer
from .uploads import UploadError, create_document


def get_user_document(request, document_id):
    """The caller's document, or None. Other users' documents are treated as missing."""
    return Document.objects.filter(id=document_id, user=request.user).first()


class DocumentListAPIView(APIView):
    parser_classes = [MultiPartParser, FormParser]

    def get(self, request):
        documents = (
            Document.objects.filter(user=request.user)
            .select_related('plagiarism_result')
            .order_by('-created_at')
        )
        return Response({"results": DocumentSerializer(documents, many=True).data}, status=200)

    def post(self, request):
        try:
            document = create_document(request.user, request.FILES.get('file'))
        except UploadError as e:
            return Response({"error": e.message}, status=e.status_code)
        return Response(DocumentSerializer(document).data, status=201)


class DocumentDetailAPIView(APIView):
    def get(self, request, document_id):
        document = get_user_document(request, document_id)
        if document is None:
            return Response({"error": "Document not found"}, status=404)
        return Response(DocumentSerializer(document).data, status=200)


class AnalysisProgressAPIView(APIView):
    def get(self, request, document_id):
        document = get_user_document(request, document_id)
        if document is None:
            return Response({"error": "Document not found"}, status=404)
        return Response(AnalysisTimeline(document).snapshot(), status=200)


class PlagiarismResultAPIView(APIView):
    def get(self, request, document_id):
        document = get_user_document(request, document_id)
        if document is None:
            return Response({"error": "Document not found"}, status=404)
        try:
            result = PlagiarismResult.objects.get(document=document)
        except PlagiarismResult.DoesNotExist:
            return Response({"error": "Analysis not finished"}, status=404)
        return Response(PlagiarismResultSerializer(result).data, status=200)
