from unittest.mock import MagicMock

import pytest
from langchain_core.documents import Document
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from pdfchat.services.chat_service import (
    SYSTEM_PROMPT,
    ChatService,
    build_context,
    build_user_prompt,
)
from pdfchat.utils import ServiceError


def test_build_context_joins_with_blank_line():
    docs = [Document(page_content="first"), Document(page_content="second")]

    assert build_context(docs) == "first\n\nsecond"


def test_build_context_of_nothing_is_empty():
    assert build_context([]) == ""


def test_generate_response_sends_system_and_grounded_user_prompt(chat_service, llm):
    docs = [Document(page_content="X is 42."), Document(page_content="Y is 7.")]

    answer = chat_service.generate_response("What is X?", docs)

    assert answer == "X is forty two."
    messages = llm.invoke.call_args[0][0]
    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == SYSTEM_PROMPT
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "Context from PDF:\nX is 42.\n\nY is 7.\n\nQuestion: What is X?"


def test_model_is_called_with_empty_context(chat_service, llm):
    chat_service.generate_response("What is X?", [])

    llm.invoke.assert_called_once()
    messages = llm.invoke.call_args[0][0]
    assert messages[1].content == build_user_prompt("What is X?", "")
    assert messages[1].content == "Context from PDF:\n\n\nQuestion: What is X?"


def test_content_parts_are_flattened(llm):
    llm.invoke.return_value = AIMessage(content=[{"type": "text", "text": "part one, "}, "part two"])

    assert ChatService(llm=llm).generate_response("q", []) == "part one, part two"


def test_model_failure_is_wrapped(llm):
    llm.invoke.side_effect = TimeoutError("model unavailable")

    with pytest.raises(ServiceError, match="Failed to generate response"):
        ChatService(llm=llm).generate_response("q", [])


def test_health_check():
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content="yes")

    assert ChatService(llm=llm).health_check()["status"] == "healthy"

    llm.invoke.side_effect = RuntimeError("down")

    assert ChatService(llm=llm).health_check()["status"] == "unhealthy"
