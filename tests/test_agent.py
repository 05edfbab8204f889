"""Tests for intent detection, roadmap/quiz generation and the chat graph."""

import json

import pytest
from langchain_core.messages import SystemMessage

from skillbridge.agent.graph import create_chat_graph
from skillbridge.agent.llm import LLMResponseError
from skillbridge.agent.nodes import chitchat, planner
from skillbridge.agent.nodes.intent import is_roadmap_request, route_by_intent
from skillbridge.agent.quiz_generator import generate_quiz, validate_questions
from skillbridge.schemas.graph import ChatFallback, GeneratedRoadmap
from skillbridge.schemas.roadmap import RoadmapPreferences

from tests.fakes import FakeChatModel

ROADMAP_REPLY = json.dumps(
    {
        "title": "Learn React",
        "nodes": [
            {"id": "1", "label": "JavaScript", "type": "input", "category": "core"},
            {"id": "2", "label": "Components", "type": "output", "category": "core"},
            {"id": "3", "label": "Testing", "category": "optional"},
        ],
        "edges": [
            {"id": "e1-2", "source": "1", "target": "2", "edgeType": "main"},
            {"id": "e2-3", "source": "2", "target": "3", "edgeType": "branch"},
        ],
    }
)


def _quiz_reply(**overrides) -> str:
    question = {
        "question": "What is JSX?",
        "options": ["A", "B", "C", "D"],
        "correctIndex": 1,
        "explanation": "Because.",
    }
    question.update(overrides)
    return json.dumps({"questions": [question] * 5})


class TestIntent:
    @pytest.mark.parametrize(
        "message",
        [
            "Create a roadmap to learn React",
            "buatkan roadmap belajar python",
            "Saya mau belajar data science",
            "teach me a roadmap for Go",
        ],
    )
    def test_roadmap_requests(self, message):
        assert is_roadmap_request(message) is True

    @pytest.mark.parametrize(
        "message",
        [
            "hello!",
            "What is this roadmap about?",
            "roadmap ini tentang apa?",
            "create something",
            "I like my roadmap",
        ],
    )
    def test_other_messages(self, message):
        assert is_roadmap_request(message) is False

    def test_routing(self):
        assert route_by_intent({"is_roadmap_request": True}) == "planner_agent"
        assert route_by_intent({"is_roadmap_request": False}) == "chitchat_agent"
        assert route_by_intent({}) == "chitchat_agent"


class TestInterpretRoadmapReply:
    def test_roadmap_in_code_block(self):
        result = planner.interpret_roadmap_reply(f"```json\n{ROADMAP_REPLY}\n```")
        assert isinstance(result, GeneratedRoadmap)
        assert result.title == "Learn React"
        assert [n.id for n in result.nodes if n.is_core] == ["1", "2"]

    def test_chat_payload(self):
        result = planner.interpret_roadmap_reply('{"type": "chat", "message": "Hi! What do you want to learn?"}')
        assert result == ChatFallback(message="Hi! What do you want to learn?")

    def test_plain_prose(self):
        result = planner.interpret_roadmap_reply("Happy to help. Which language?")
        assert isinstance(result, ChatFallback)
        assert result.message == "Happy to help. Which language?"

    def test_missing_nodes_falls_back(self):
        result = planner.interpret_roadmap_reply('{"title": "Empty", "nodes": []}')
        assert result == ChatFallback(message=planner.FALLBACK_MESSAGE)

    def test_missing_title_falls_back(self):
        result = planner.interpret_roadmap_reply('{"nodes": [{"id": "1", "label": "x"}]}')
        assert isinstance(result, ChatFallback)


@pytest.mark.asyncio
async def test_generate_roadmap_sends_preferences() -> None:
    llm = FakeChatModel(ROADMAP_REPLY)
    result = await planner.generate_roadmap(
        "React", RoadmapPreferences(level="advanced", language="Indonesian", focus="hooks"), llm=llm
    )

    assert isinstance(result, GeneratedRoadmap)
    system, human = llm.calls[0]
    assert isinstance(system, SystemMessage)
    assert "Learner level: advanced" in human.content
    assert "Indonesian" in human.content
    assert "hooks" in human.content


class TestQuizGeneration:
    @pytest.mark.asyncio
    async def test_valid_quiz(self):
        questions = await generate_quiz("JSX", "Syntax extension", llm=FakeChatModel(_quiz_reply()))
        assert len(questions) == 5
        assert questions[0].correct_index == 1

    @pytest.mark.asyncio
    async def test_prompt_mentions_topic_and_context(self):
        llm = FakeChatModel(_quiz_reply())
        await generate_quiz("JSX", "Syntax extension", llm=llm)
        assert llm.calls[0][1].content == 'Generate a quiz about "JSX". Context: Syntax extension'

    @pytest.mark.asyncio
    async def test_unparseable_reply(self):
        with pytest.raises(LLMResponseError, match="no valid JSON found"):
            await generate_quiz("JSX", llm=FakeChatModel("I cannot do that."))

    def test_wrong_option_count(self):
        with pytest.raises(LLMResponseError, match="Question 0 must have exactly 4 options"):
            validate_questions(json.loads(_quiz_reply(options=["A", "B"])))

    def test_correct_index_out_of_range(self):
        with pytest.raises(LLMResponseError, match="Invalid correctIndex at question 0"):
            validate_questions(json.loads(_quiz_reply(correctIndex=4)))

    def test_missing_question_text(self):
        with pytest.raises(LLMResponseError, match="Invalid question at index 0"):
            validate_questions(json.loads(_quiz_reply(question="")))

    def test_missing_questions_list(self):
        with pytest.raises(LLMResponseError, match="Invalid quiz format from AI"):
            validate_questions({"quiz": []})

    def test_explanation_defaults(self):
        questions = validate_questions(json.loads(_quiz_reply(explanation=None)))
        assert questions[0].explanation == "No explanation provided"


class TestChatGraph:
    @pytest.mark.asyncio
    async def test_roadmap_request_goes_to_planner(self, monkeypatch):
        monkeypatch.setattr(planner, "get_llm", lambda: FakeChatModel(ROADMAP_REPLY))

        state = await create_chat_graph().ainvoke(
            {"raw_message": "Create a roadmap to learn React", "preferences": {}}
        )

        assert state["response"]["type"] == "roadmap"
        assert state["roadmap"]["title"] == "Learn React"

    @pytest.mark.asyncio
    async def test_planner_failure_becomes_chat_reply(self, monkeypatch):
        def broken_llm():
            raise RuntimeError("no api key")

        monkeypatch.setattr(planner, "get_llm", broken_llm)

        state = await create_chat_graph().ainvoke({"raw_message": "Create a roadmap to learn Go"})

        assert state["response"] == {"type": "chat", "content": planner.FALLBACK_MESSAGE}
        assert state.get("roadmap") is None

    @pytest.mark.asyncio
    async def test_node_panel_never_plans(self, monkeypatch):
        llm = FakeChatModel("Components are reusable pieces of UI.")
        monkeypatch.setattr(chitchat, "get_fast_llm", lambda: llm)

        state = await create_chat_graph().ainvoke(
            {
                "raw_message": "Create a roadmap to learn React",
                "node_id": "2",
                "node_context": {"label": "Components", "description": "Building blocks"},
                "history": [
                    {"role": "user", "content": "hi"},
                    {"role": "assistant", "content": "hello"},
                ],
            }
        )

        assert state["response"] == {
            "type": "chat",
            "content": "Components are reusable pieces of UI.",
        }
        messages = llm.calls[0]
        assert "Topic: Components" in messages[0].content
        assert [m.content for m in messages[1:]] == ["hi", "hello", "Create a roadmap to learn React"]

    @pytest.mark.asyncio
    async def test_chitchat_failure_uses_fallback_reply(self, monkeypatch):
        def broken_llm():
            raise RuntimeError("offline")

        monkeypatch.setattr(chitchat, "get_fast_llm", broken_llm)

        state = await create_chat_graph().ainvoke({"raw_message": "hello"})
        assert state["response"]["content"] == chitchat.FALLBACK_REPLY
