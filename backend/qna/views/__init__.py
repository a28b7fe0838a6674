from qna.views.answer_handlers import (
    add_answer as add_answer,
)
from qna.views.answer_handlers import (
    delete_answer as delete_answer,
)
from qna.views.answer_handlers import (
    get_answers as get_answers,
)
from qna.views.answer_handlers import (
    update_answer as update_answer,
)
from qna.views.auth_handlers import login as login
from qna.views.auth_handlers import registration as registration
from qna.views.errors import EXCEPTION_HANDLERS as EXCEPTION_HANDLERS
from qna.views.question_handlers import (
    add_question as add_question,
)
from qna.views.question_handlers import (
    delete_question as delete_question,
)
from qna.views.question_handlers import (
    get_questions as get_questions,
)
from qna.views.question_handlers import (
    update_question as update_question,
)
