class TestEnhanceExperience:
    def test_returns_trimmed_text(self, client, fake_ai):
        fake_ai.reply = "  - Led a team of 5\n- Cut costs 20%  "
        response = client.post(
            "/api/enhance-experience",
            json={"description": "managed people, saved money", "jobTitle": "Team Lead"},
        )
        assert response.status_code == 200
        assert response.json() == {"enhancedText": "- Led a team of 5\n- Cut costs 20%"}

        call = fake_ai.calls[0]
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 300
        assert "Team Lead" in call["messages"][1]["content"]
        assert "managed people, saved money" in call["messages"][1]["content"]

    def test_missing_job_title(self, client, fake_ai):
        response = client.post("/api/enhance-experience", json={"description": "did things"})
        assert response.status_code == 400
        assert response.json() == {"error": "Job title is required"}
        assert fake_ai.calls == []

    def test_not_configured(self, client, fake_ai):
        fake_ai.configured = False
        response = client.post(
            "/api/enhance-experience",
            json={"description": "did things", "jobTitle": "Dev"},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key not configured"}


class TestEnhanceSummary:
    def test_returns_summary(self, client, fake_ai):
        fake_ai.reply = "Seasoned engineer."
        response = client.post(
            "/api/enhance-summary",
            json={"summary": "i code", "jobTitle": "Engineer"},
        )
        assert response.status_code == 200
        assert response.json() == {"enhancedSummary": "Seasoned engineer."}
        assert fake_ai.calls[0]["max_tokens"] == 200

    def test_missing_summary(self, client):
        response = client.post("/api/enhance-summary", json={"jobTitle": "Engineer"})
        assert response.status_code == 400
        assert response.json() == {"error": "Summary is required"}


class TestEnhanceText:
    def test_returns_text(self, client, fake_ai):
        fake_ai.reply = "Delivered the project early."
        response = client.post("/api/enhance-text", json={"text": "we finished early"})
        assert response.status_code == 200
        assert response.json() == {"enhancedText": "Delivered the project early."}
        assert fake_ai.calls[0]["messages"][1] == {"role": "user", "content": "we finished early"}
        assert fake_ai.calls[0]["max_tokens"] == 500

    def test_too_short(self, client, fake_ai):
        response = client.post("/api/enhance-text", json={"text": "  ab  "})
        assert response.status_code == 400
        assert response.json() == {"error": "Text must be at least 5 characters long"}
        assert fake_ai.calls == []

    def test_missing_text(self, client):
        response = client.post("/api/enhance-text", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Text is required"}

    def test_upstream_failure(self, client, fake_ai):
        fake_ai.error = "AI request timed out"
        response = client.post("/api/enhance-text", json={"text": "we finished early"})
        assert response.status_code == 500
        assert response.json() == {"error": "AI request timed out"}
