"""
JavaScript injected into the page's isolated world.

Every snippet is an (async) arrow function taking one `args` object. They run
inside `PAGE_WRAPPER`, which provides the shared helpers below and converts a
thrown error into `{ok: false, kind, message}`; `kind` is the error name set by
`__fail` and maps onto the Python error taxonomy.
"""

from __future__ import annotations

# ═══════════════════════════════════════════════════════════════════════════════
# Shared helpers
# ═══════════════════════════════════════════════════════════════════════════════

PRELUDE = """
const __sleep = (ms) => new Promise((resolve) => setTimeout(resolve, ms));

const __fail = (kind, message) => {
    const err = new Error(message);
    err.name = kind;
    throw err;
};

// Bounded poll: check every intervalMs until truthy or timeoutMs elapses,
// then check one last time.
const __waitFor = async (check, timeoutMs, intervalMs) => {
    const start = performance.now();
    while (performance.now() - start < timeoutMs) {
        const found = check();
        if (found) return found;
        await __sleep(intervalMs);
    }
    return check() || null;
};

const __queryAll = (selector) => {
    try {
        return document.querySelectorAll(selector);
    } catch (e) {
        __fail('InvalidSelector', 'Invalid selector: ' + selector);
    }
};

const __nth = (selector, index) => {
    const list = __queryAll(selector);
    return list.length > index ? list[index] : null;
};

const __hasValue = (node) => node && node.nodeType === Node.ELEMENT_NODE && 'value' in node;

const __clickAt = (el, plan) => {
    el.scrollIntoView({ block: 'center', inline: 'center' });
    const rect = el.getBoundingClientRect();
    const clientX = rect.left + rect.width / 2;
    const clientY = rect.top + rect.height / 2;
    for (const type of plan.events) {
        el.dispatchEvent(new MouseEvent(type, { bubbles: true, clientX, clientY }));
    }
};

const __typeInto = async (el, text, plan) => {
    el.focus();
    if (plan.clear && 'value' in el) el.value = '';
    for (const ch of text) {
        for (const type of plan.keystroke) {
            if (type === 'input') {
                if ('value' in el) el.value += ch;
                el.dispatchEvent(new InputEvent('input', { bubbles: true, data: ch }));
            } else {
                el.dispatchEvent(new KeyboardEvent(type, { key: ch, bubbles: true }));
            }
        }
        await __sleep(plan.delayMs);
    }
    el.dispatchEvent(new Event('change', { bubbles: true }));
    if (plan.enter) {
        for (const type of plan.enterSequence) {
            el.dispatchEvent(new KeyboardEvent(type, { key: 'Enter', bubbles: true }));
        }
    }
};

const __setFormValue = (el, value) => {
    el.value = value;
    el.dispatchEvent(new InputEvent('input', { bubbles: true, data: value }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
};
"""

PAGE_WRAPPER = """
async (__args) => {
__PRELUDE__
    try {
        const value = await (__BODY__)(__args);
        return { ok: true, value: value === undefined ? null : value };
    } catch (e) {
        return {
            ok: false,
            kind: (e && e.name) || 'Error',
            message: (e && e.message) || String(e),
        };
    }
}
"""

# ═══════════════════════════════════════════════════════════════════════════════
# CSS selector commands
# ═══════════════════════════════════════════════════════════════════════════════

CLICK_JS = """
async ({ selector, index, timeoutMs, intervalMs, plan }) => {
    const el = await __waitFor(() => __nth(selector, index), timeoutMs, intervalMs);
    if (!el) __fail('ElementNotFound', `Element not found: ${selector}[${index}]`);
    __clickAt(el, plan);
    return { clicked: true };
}
"""

TYPE_JS = """
async ({ selector, index, timeoutMs, intervalMs, text, plan }) => {
    const el = await __waitFor(() => __nth(selector, index), timeoutMs, intervalMs);
    if (!el) __fail('ElementNotFound', `Element not found: ${selector}[${index}]`);
    await __typeInto(el, text, plan);
    return { typed: true, length: text.length };
}
"""

SET_JS = """
({ selector, index, value, attr }) => {
    const el = __nth(selector, index);
    if (!el) __fail('ElementNotFound', `Element not found: ${selector}[${index}]`);
    if (attr) {
        el.setAttribute(attr, value);
    } else if ('value' in el) {
        __setFormValue(el, value);
    } else {
        el.textContent = value;
    }
    return { set: true };
}
"""

EXISTS_JS = """
({ selector, index }) => ({ exists: __queryAll(selector).length > index })
"""

GET_HTML_JS = """
({ selector }) => {
    if (!selector) return { html: document.documentElement.outerHTML };
    const el = __nth(selector, 0);
    return { html: el ? el.outerHTML : '' };
}
"""

# ═══════════════════════════════════════════════════════════════════════════════
# Script execution
# ═══════════════════════════════════════════════════════════════════════════════

EXEC_JS = """
({ js }) => {
    let result;
    try {
        const fn = new Function('"use strict"; return (' + js + ')');
        result = fn();
    } catch (e) {
        __fail('ExecutionError', 'exec_js error: ' + ((e && e.message) || String(e)));
    }
    try {
        return { result: JSON.parse(JSON.stringify(result)) };
    } catch (e) {
        return { result: String(result) };
    }
}
"""

# ═══════════════════════════════════════════════════════════════════════════════
# XPath
# ═══════════════════════════════════════════════════════════════════════════════

XPATH_JS = """
async (p) => {
    const { expr, action, index, timeoutMs, intervalMs, attr, text, max, includeHTML, maxLen, click, typing } = p;

    const evalSnapshot = () => {
        try {
            return document.evaluate(expr, document, null, XPathResult.ORDERED_NODE_SNAPSHOT_TYPE, null);
        } catch (e) {
            __fail('InvalidXPath', 'Invalid XPath: ' + ((e && e.message) || String(e)));
        }
    };

    const summarize = (node) => {
        try {
            if (node.nodeType === Node.ELEMENT_NODE) {
                const rect = node.getBoundingClientRect();
                const out = {
                    nodeType: 'element',
                    tag: node.tagName,
                    id: node.id || null,
                    classes: node.className || null,
                    name: node.getAttribute('name') || null,
                    value: 'value' in node ? node.value : null,
                    rect: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
                };
                if (includeHTML) {
                    const html = node.outerHTML || '';
                    out.html_truncated = html.length > maxLen;
                    out.html = out.html_truncated ? html.slice(0, maxLen) : html;
                }
                return out;
            }
            if (node.nodeType === Node.TEXT_NODE) {
                return { nodeType: 'text', text: (node.nodeValue || '').slice(0, 200) };
            }
            return { nodeType: 'other', nodeName: node.nodeName };
        } catch (e) {
            return { nodeType: 'unknown' };
        }
    };

    const targeted = ['click', 'getAttribute', 'getHTML', 'getText', 'setValue', 'type'].includes(action);
    let snap;
    if (targeted) {
        snap = await __waitFor(() => {
            const s = evalSnapshot();
            return s.snapshotLength > index ? s : null;
        }, timeoutMs, intervalMs);
        if (!snap) snap = evalSnapshot();
    } else {
        snap = evalSnapshot();
    }
    const count = snap.snapshotLength;
    const nth = (i) => (i < count ? snap.snapshotItem(i) : null);
    const ensureElement = (node) => {
        if (!node || node.nodeType !== Node.ELEMENT_NODE) __fail('NotAnElement', 'Target is not an element node');
        return node;
    };
    const ensureNode = (node) => {
        if (!node) __fail('NoNodeAtIndex', 'No node at index');
        return node;
    };

    switch (action) {
        case 'list': {
            const nodes = [];
            const n = Math.min(count, Math.max(0, max));
            for (let i = 0; i < n; i++) nodes.push(summarize(snap.snapshotItem(i)));
            return { count, nodes };
        }
        case 'exists':
            return { exists: count > 0 };
        case 'count':
            return { count };
        case 'click': {
            __clickAt(ensureElement(nth(index)), click);
            return { clicked: true };
        }
        case 'getAttribute':
            return { value: ensureElement(nth(index)).getAttribute(attr) };
        case 'getHTML':
            return { html: ensureElement(nth(index)).outerHTML || '' };
        case 'getText': {
            const txt = ensureNode(nth(index)).textContent || '';
            return { text: txt, length: txt.length };
        }
        case 'setValue': {
            const node = ensureNode(nth(index));
            if (__hasValue(node)) {
                __setFormValue(node, text);
            } else {
                node.textContent = text;
            }
            return { set: true };
        }
        case 'type': {
            const node = ensureElement(nth(index));
            await __typeInto(node, text, typing);
            return { typed: true, length: text.length };
        }
        default:
            __fail('UnknownAction', 'Unknown xpath action: ' + action);
    }
}
"""
