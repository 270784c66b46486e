import azure.functions as func
from ukmla_saq.handlers.generate_question_handler import handle_generate_question
from ukmla_saq.handlers.evaluate_answer_handler import handle_evaluate_answer
from ukmla_saq.services.connection_service import handle_test_connections

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)


@app.route(route="generate-question")
def generate_question(req: func.HttpRequest) -> func.HttpResponse:
    return handle_generate_question(req)


@app.route(route="evaluate-answer")
def evaluate_answer(req: func.HttpRequest) -> func.HttpResponse:
    return handle_evaluate_answer(req)


@app.route(route="test_connections", methods=["GET", "POST"], auth_level=func.AuthLevel.FUNCTION)
def test_connections(req: func.HttpRequest) -> func.HttpResponse:
    return handle_test_connections(req)
