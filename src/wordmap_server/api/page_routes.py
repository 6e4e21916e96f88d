"""
Word Map Page

Serves the single interactive page. Opening the page loads nothing heavy:
Plotly is pulled in on the first successful run, and every server-side asset
is loaded on first use by the run and similarity endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["page"])


PLOTLY_URL = "https://cdn.plot.ly/plotly-2.32.0.min.js"


@router.get("/", response_class=HTMLResponse)
async def word_map_page():
    """
    Serve the word map page.
    """
    html_content = """
<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Word Map</title>
    <style>
        body { font-family: sans-serif; margin: 1.5rem; max-width: 960px; }
        textarea { width: 100%; height: 8rem; }
        #plot { width: 100%; height: 520px; }
        #status { color: #555; margin: .5rem 0; }
    </style>
</head>
<body>
    <h1>Word Map</h1>
    <textarea id="textInput" placeholder="日本語のテキストを入力"></textarea>
    <div>
        <label><input type="checkbox" id="posFilter" checked> 名詞・動詞・形容詞のみ</label>
        <label><input type="checkbox" id="uniqueOnly" checked> 重複を除く</label>
        <button id="runBtn">Run</button>
    </div>
    <div id="status">Ready (press Run to start)</div>
    <div id="plot"></div>
    <h2>Similar to: <span id="selectedWord">-</span></h2>
    <ol id="simList"></ol>

    <script>
        const PLOTLY_URL = "__PLOTLY_URL__";
        const els = {
            text: document.getElementById('textInput'),
            run: document.getElementById('runBtn'),
            status: document.getElementById('status'),
            plot: document.getElementById('plot'),
            posFilter: document.getElementById('posFilter'),
            uniqueOnly: document.getElementById('uniqueOnly'),
            selectedWord: document.getElementById('selectedWord'),
            simList: document.getElementById('simList'),
        };
        let sessionId = null;
        let busy = false;

        function setStatus(msg) { els.status.textContent = msg; }

        function loadScriptOnce(src) {
            return new Promise((resolve, reject) => {
                if ([...document.scripts].some(s => s.src === src)) return resolve();
                const s = document.createElement('script');
                s.src = src;
                s.async = true;
                s.onload = () => resolve();
                s.onerror = () => reject(new Error(`Failed to load: ${src}`));
                document.head.appendChild(s);
            });
        }

        async function postJSON(url, body) {
            const res = await fetch(url, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body),
            });
            const data = await res.json();
            if (!res.ok) throw new Error(data.detail || `HTTP ${res.status}`);
            return data;
        }

        async function showSimilar(pointIndex) {
            if (busy) return;
            busy = true;
            els.simList.innerHTML = '';
            setStatus('Loading similar words...');
            try {
                const data = await postJSON('/wordmap/similar', {
                    session_id: sessionId, point_index: pointIndex,
                });
                els.selectedWord.textContent = data.word;
                for (const { word, score } of data.similar) {
                    const li = document.createElement('li');
                    li.textContent = `${word}（類似度: ${score.toFixed(3)}）`;
                    els.simList.appendChild(li);
                }
                setStatus(data.status);
            } catch (err) {
                console.error(err);
                alert(`Error: ${err.message}`);
                setStatus(`Error: ${err.message}`);
            } finally {
                busy = false;
            }
        }

        function renderPlot(points) {
            window.Plotly.newPlot(els.plot, [{
                x: points.map(p => p.x),
                y: points.map(p => p.y),
                text: points.map(p => p.label),
                mode: 'markers+text',
                type: 'scatter',
                textposition: 'top center',
                hoverinfo: 'text',
                marker: { size: 10, opacity: 0.85 },
            }], {
                margin: { l: 30, r: 10, t: 10, b: 30 },
                showlegend: false,
            }, { responsive: true });

            els.plot.removeAllListeners && els.plot.removeAllListeners('plotly_click');
            els.plot.on('plotly_click', (data) => {
                const idx = data.points?.[0]?.pointIndex;
                if (idx == null) return;
                showSimilar(idx);
            });
        }

        async function run() {
            const text = (els.text.value || '').trim();
            if (!text) { alert('テキストを入力してください。'); return; }
            if (busy) return;

            busy = true;
            els.run.disabled = true;
            setStatus('Running (first run loads the analyzer and tables)...');
            try {
                const data = await postJSON('/wordmap/run', {
                    text: text,
                    pos_filter: els.posFilter.checked,
                    unique_only: els.uniqueOnly.checked,
                    session_id: sessionId,
                });
                sessionId = data.session_id;
                setStatus(data.status);
                if (data.ok) {
                    await loadScriptOnce(PLOTLY_URL);
                    els.simList.innerHTML = '';
                    els.selectedWord.textContent = '-';
                    renderPlot(data.points);
                }
            } catch (err) {
                console.error(err);
                alert(`Error: ${err.message}`);
                setStatus(`Error: ${err.message}`);
            } finally {
                busy = false;
                els.run.disabled = false;
            }
        }

        els.run.addEventListener('click', run);
    </script>
</body>
</html>
"""
    return HTMLResponse(content=html_content.replace("__PLOTLY_URL__", PLOTLY_URL))
