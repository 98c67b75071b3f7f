"""FastAPI web application for side-by-side prompt comparison."""

import json
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from .catalog import list_models
from .errors import InvalidInput, UpstreamError
from .providers import ProviderRouter, TextGenerator
from .relay import compare
from .settings import Settings, configure_logging, load_settings


@lru_cache
def get_settings() -> Settings:
    return load_settings()


configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


def get_generator(settings: Settings = Depends(get_settings)) -> TextGenerator:
    """Provider used by the compare endpoint; overridden in tests."""
    return ProviderRouter(timeout=settings.provider_timeout_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting Prompt Tester (default model: {settings.default_model})...")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Prompt Tester",
    description="Compare LLM outputs side-by-side across models and parameters",
    version="0.1.0",
    lifespan=lifespan
)


class CompareRequest(BaseModel):
    """Raw compare request; range checks happen in the relay."""
    prompt: Any = None
    model: str | None = None
    temperature: Any = None
    max_tokens: Any = None


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies with the same envelope as other errors."""
    logger.info(f"Rejected malformed request to {request.url.path}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/", response_class=HTMLResponse)
async def home(settings: Settings = Depends(get_settings)):
    """Serve the comparison page."""
    return get_html_page(settings.default_model)


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/api/models")
async def get_available_models():
    """Get the list of selectable models."""
    return {"models": list_models()}


@app.post("/api/prompts/compare")
def compare_prompt(
    request: CompareRequest,
    generator: TextGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
):
    """Validate the request and relay it to the provider."""
    try:
        result = compare(
            request.prompt,
            request.model,
            request.temperature,
            request.max_tokens,
            generator=generator,
            default_model=settings.default_model,
        )
    except InvalidInput as e:
        logger.info(f"Rejected compare request: {e}")
        return JSONResponse(status_code=400, content={"error": str(e)})
    except UpstreamError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    except Exception:
        logger.exception("Unexpected error relaying prompt")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return result.to_dict()


def main() -> None:
    """Run the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    url = f"http://{settings.host}:{settings.port}"
    logger.info(f"Prompt Tester listening on {url}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def get_html_page(default_model: str) -> str:
    """Generate the HTML page for the application."""
    return PAGE_TEMPLATE.replace("__DEFAULT_MODEL__", json.dumps(default_model))


PAGE_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Prompt Tester | Side-by-side LLM comparison</title>
    <style>
        :root {
            --bg-deep: #0a0a0f;
            --bg-card: #12121a;
            --bg-elevated: #1a1a25;
            --border-subtle: #2a2a3a;
            --text-primary: #e8e8ed;
            --text-secondary: #8888a0;
            --text-muted: #5a5a70;
            --accent-cyan: #00d4ff;
            --accent-magenta: #ff006e;
            --gradient-cyan: linear-gradient(135deg, #00d4ff 0%, #0099cc 100%);
        }

        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: system-ui, sans-serif;
            background: var(--bg-deep);
            color: var(--text-primary);
            min-height: 100vh;
            line-height: 1.6;
        }

        .app-container {
            max-width: 1600px;
            margin: 0 auto;
            padding: 2rem;
        }

        .header {
            text-align: center;
            margin-bottom: 2rem;
        }

        .logo {
            font-size: 2.5rem;
            font-weight: 700;
            color: var(--accent-cyan);
        }

        .tagline {
            color: var(--text-secondary);
        }

        .prompt-input-textarea {
            width: 100%;
            min-height: 140px;
            background: var(--bg-card);
            border: 1px solid var(--border-subtle);
            border-radius: 12px;
            padding: 1rem;
            color: var(--text-primary);
            font-size: 1rem;
            resize: vertical;
        }

        .hint {
            color: var(--text-muted);
            font-size: 0.85rem;
        }

        .grid-controls {
            display: flex;
            gap: 0.75rem;
            align-items: center;
            margin: 1.5rem 0 1rem;
        }

        .comparison-grid {
            display: grid;
            gap: 1rem;
        }

        .comparison-column {
            background: var(--bg-card);
            border: 1px solid var(--border-subtle);
            border-radius: 12px;
            padding: 1rem;
            display: flex;
            flex-direction: column;
            gap: 0.75rem;
        }

        .control-group {
            display: flex;
            flex-direction: column;
            gap: 0.25rem;
        }

        .control-label {
            color: var(--text-secondary);
            font-size: 0.85rem;
        }

        .model-select, .max-tokens-input {
            background: var(--bg-elevated);
            border: 1px solid var(--border-subtle);
            border-radius: 8px;
            padding: 0.4rem 0.75rem;
            color: var(--text-primary);
        }

        .response-display {
            min-height: 200px;
            background: var(--bg-elevated);
            border-radius: 8px;
            padding: 0.75rem;
            white-space: pre-wrap;
            overflow-y: auto;
        }

        .response-display.empty {
            color: var(--text-muted);
            display: flex;
            align-items: center;
            justify-content: center;
        }

        .error-message {
            color: var(--accent-magenta);
        }

        .response-metadata {
            display: flex;
            justify-content: space-between;
            align-items: center;
            color: var(--text-muted);
            font-size: 0.8rem;
        }

        .button-group {
            display: flex;
            gap: 0.5rem;
        }

        .btn-primary, .btn-secondary {
            border: none;
            border-radius: 8px;
            padding: 0.5rem 1.25rem;
            font-weight: 600;
            cursor: pointer;
        }

        .btn-primary {
            background: var(--gradient-cyan);
            color: var(--bg-deep);
        }

        .btn-secondary {
            background: var(--bg-elevated);
            color: var(--text-primary);
            border: 1px solid var(--border-subtle);
        }

        .btn-sm {
            padding: 0.25rem 0.75rem;
            font-size: 0.8rem;
        }

        button:disabled {
            opacity: 0.4;
            cursor: not-allowed;
        }
    </style>
</head>
<body>
    <div class="app-container">
        <header class="header">
            <h1 class="logo">Prompt Tester</h1>
            <p class="tagline">Compare model outputs side-by-side with different parameters</p>
        </header>

        <section>
            <label for="prompt-textarea" class="control-label">Enter Your Prompt</label>
            <textarea id="prompt-textarea" class="prompt-input-textarea"
                      placeholder="Enter the prompt you want to compare across different models and parameters..."></textarea>
            <small class="hint">This prompt will be sent to a comparison column when you click its Run button</small>
        </section>

        <div class="grid-controls">
            <button class="btn-secondary btn-sm" id="remove-column-btn" onclick="removeColumn()">- Remove Column</button>
            <button class="btn-secondary btn-sm" id="add-column-btn" onclick="addColumn()">+ Add Column</button>
            <span class="hint" id="column-count"></span>
        </div>

        <div class="comparison-grid" id="comparison-grid">
            <!-- Filled by JS -->
        </div>
    </div>

    <script>
        const DEFAULT_MODEL = __DEFAULT_MODEL__;
        const DEFAULT_TEMPERATURE = 0.7;
        const DEFAULT_MAX_TOKENS = 1024;
        const MIN_COLUMNS = 1;
        const MAX_COLUMNS = 4;

        let availableModels = [{id: DEFAULT_MODEL, name: DEFAULT_MODEL}];
        let columns = [];

        function newColumn() {
            return {
                model: DEFAULT_MODEL,
                temperature: DEFAULT_TEMPERATURE,
                maxTokens: DEFAULT_MAX_TOKENS,
                response: '',
                error: null,
                executedAt: null,
                isLoading: false,
                controller: null,
                runId: 0,
            };
        }

        async function init() {
            try {
                const resp = await fetch('/api/models');
                const data = await resp.json();
                availableModels = data.models;
            } catch (err) {
                console.error('Failed to fetch models, using defaults:', err);
            }

            columns = [newColumn(), newColumn()];
            renderGrid();

            document.getElementById('prompt-textarea').addEventListener('input', updateRunButtons);
        }

        function currentPrompt() {
            return document.getElementById('prompt-textarea').value;
        }

        function addColumn() {
            if (columns.length >= MAX_COLUMNS) return;
            columns.push(newColumn());
            renderGrid();
        }

        function removeColumn() {
            if (columns.length <= MIN_COLUMNS) return;
            const removed = columns.pop();
            if (removed.controller) removed.controller.abort();
            renderGrid();
        }

        async function executePrompt(index) {
            const col = columns[index];
            const prompt = currentPrompt();
            if (!prompt.trim()) {
                col.error = 'Please enter a prompt';
                renderColumn(index);
                return;
            }

            if (col.controller) col.controller.abort();
            const controller = new AbortController();
            const runId = col.runId + 1;
            col.controller = controller;
            col.runId = runId;

            col.isLoading = true;
            col.error = null;
            col.response = '';
            renderColumn(index);

            try {
                const resp = await fetch('/api/prompts/compare', {
                    method: 'POST',
                    headers: {'Content-Type': 'application/json'},
                    body: JSON.stringify({
                        prompt: prompt,
                        model: col.model,
                        temperature: col.temperature,
                        max_tokens: col.maxTokens,
                    }),
                    signal: controller.signal,
                });
                const data = await resp.json();
                if (col.runId !== runId) return;
                if (!resp.ok) throw new Error(data.error || resp.statusText);

                col.response = data.content;
                col.executedAt = new Date().toLocaleTimeString();
                col.error = null;
            } catch (err) {
                if (col.runId !== runId || err.name === 'AbortError') return;
                col.error = err.message.startsWith('API Error') ? err.message : `API Error: ${err.message}`;
                col.response = '';
            }
            col.isLoading = false;
            col.controller = null;
            renderColumn(index);
        }

        function clearResponse(index) {
            const col = columns[index];
            col.response = '';
            col.error = null;
            col.executedAt = null;
            renderColumn(index);
        }

        function resetParameters(index) {
            const col = columns[index];
            col.model = DEFAULT_MODEL;
            col.temperature = DEFAULT_TEMPERATURE;
            col.maxTokens = DEFAULT_MAX_TOKENS;
            clearResponse(index);
        }

        function setTemperature(index, value) {
            columns[index].temperature = parseFloat(value);
            document.getElementById(`temp-label-${index}`).textContent =
                `Temperature (${columns[index].temperature.toFixed(2)})`;
        }

        function setMaxTokens(index, value) {
            // unparseable input is sent as typed; the relay reports it
            const parsed = parseInt(value, 10);
            columns[index].maxTokens = Number.isNaN(parsed) ? value : parsed;
        }

        function renderGrid() {
            const grid = document.getElementById('comparison-grid');
            grid.style.gridTemplateColumns = `repeat(${columns.length}, 1fr)`;
            grid.innerHTML = columns.map((_, i) => `<div class="comparison-column" id="column-${i}"></div>`).join('');
            columns.forEach((_, i) => renderColumn(i));

            const count = columns.length;
            document.getElementById('column-count').textContent = `${count} column${count !== 1 ? 's' : ''}`;
            document.getElementById('remove-column-btn').disabled = count === MIN_COLUMNS;
            document.getElementById('add-column-btn').disabled = count === MAX_COLUMNS;
        }

        function renderResponse(col, index) {
            if (col.isLoading) {
                return '<div class="response-display empty">Generating response...</div>';
            }
            if (col.error) {
                return `<div class="response-display empty"><div class="error-message">${escapeHtml(col.error)}</div></div>`;
            }
            if (!col.response) {
                return '<div class="response-display empty">Ready to compare... Click Run to generate a response</div>';
            }
            return `
                <div class="response-display">${escapeHtml(col.response)}</div>
                ${col.executedAt ? `
                    <div class="response-metadata">
                        <span>Executed: ${col.executedAt}</span>
                        <button class="btn-secondary btn-sm" onclick="clearResponse(${index})">Clear</button>
                    </div>` : ''}
            `;
        }

        function renderColumn(index) {
            const col = columns[index];
            const disabled = col.isLoading ? 'disabled' : '';
            const options = availableModels.map(m =>
                `<option value="${m.id}" ${m.id === col.model ? 'selected' : ''}>${escapeHtml(m.name)}</option>`
            ).join('');

            document.getElementById(`column-${index}`).innerHTML = `
                <h3>Comparison ${index + 1}</h3>
                <div class="control-group">
                    <label class="control-label">Model</label>
                    <select class="model-select" ${disabled}
                            onchange="columns[${index}].model = this.value">${options}</select>
                </div>
                <div class="control-group">
                    <label class="control-label" id="temp-label-${index}">Temperature (${col.temperature.toFixed(2)})</label>
                    <input type="range" min="0" max="1" step="0.01" value="${col.temperature}" ${disabled}
                           oninput="setTemperature(${index}, this.value)">
                    <small class="hint">0 = Deterministic, 1 = Creative</small>
                </div>
                <div class="control-group">
                    <label class="control-label">Max Tokens</label>
                    <input type="number" class="max-tokens-input" min="1" max="4096" value="${col.maxTokens}" ${disabled}
                           onchange="setMaxTokens(${index}, this.value)">
                    <small class="hint">Max output length (1-4096)</small>
                </div>
                ${renderResponse(col, index)}
                <div class="button-group">
                    <button class="btn-primary run-btn" data-index="${index}" onclick="executePrompt(${index})">
                        ${col.isLoading ? 'Running...' : 'Run'}
                    </button>
                    <button class="btn-secondary" onclick="resetParameters(${index})" ${disabled}>Reset</button>
                </div>
            `;
            updateRunButtons();
        }

        function updateRunButtons() {
            const blank = !currentPrompt().trim();
            document.querySelectorAll('.run-btn').forEach(btn => {
                const col = columns[Number(btn.dataset.index)];
                btn.disabled = blank || (col && col.isLoading);
            });
        }

        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = text;
            return div.innerHTML;
        }

        document.addEventListener('DOMContentLoaded', init);
    </script>
</body>
</html>
'''
