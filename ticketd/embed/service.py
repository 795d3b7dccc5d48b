import json
import logging
from typing import Any, Dict, List

from ticketd.clients.schemas import ClientResponse
from ticketd.config import settings
from ticketd.errors import InvalidInputError
from ticketd.forms.models import FormType
from ticketd.forms.schemas import FormResponse

logger = logging.getLogger(__name__)

PRIORITY_OPTIONS = ["low", "medium", "high"]

DEFAULT_CSS = """\
.ticketd-embed { font-family: system-ui, -apple-system, "Segoe UI", sans-serif; max-width: 480px; }
.ticketd-form { display: flex; flex-direction: column; gap: 0.75rem; padding: 1rem; border: 1px solid #d0d7de; border-radius: 8px; }
.ticketd-form h3 { margin: 0 0 0.5rem; font-size: 1.1rem; }
.ticketd-form label { display: flex; flex-direction: column; gap: 0.25rem; font-size: 0.9rem; }
.ticketd-form input, .ticketd-form select, .ticketd-form textarea { padding: 0.5rem; border: 1px solid #d0d7de; border-radius: 4px; font: inherit; }
.ticketd-form textarea { min-height: 120px; resize: vertical; }
.ticketd-form button { padding: 0.6rem 1rem; border: 0; border-radius: 4px; background: #1f6feb; color: #fff; cursor: pointer; }
.ticketd-form button[disabled] { opacity: 0.6; cursor: default; }
.ticketd-status { font-size: 0.9rem; }
.ticketd-status.error { color: #cf222e; }
.ticketd-status.success { color: #1a7f37; }
"""

SCRIPT_TEMPLATE = """\
(function(){
  var cfg = %s;
  var scriptTag = document.currentScript;
  var mount = document.createElement("div");
  mount.className = "ticketd-embed";
  if (scriptTag && scriptTag.parentNode) {
    scriptTag.parentNode.insertBefore(mount, scriptTag);
  } else {
    document.body.appendChild(mount);
  }
  if (!document.querySelector('link[data-ticketd="true"]')) {
    var link = document.createElement("link");
    link.rel = "stylesheet";
    link.href = cfg.cssURL;
    link.setAttribute("data-ticketd", "true");
    document.head.appendChild(link);
  }

  var form = document.createElement("form");
  form.className = "ticketd-form";
  var title = document.createElement("h3");
  title.textContent = cfg.title;
  form.appendChild(title);

  cfg.fields.forEach(function(field){
    var label = document.createElement("label");
    label.textContent = field.label;
    var input;
    if (field.type === "textarea") {
      input = document.createElement("textarea");
    } else if (field.type === "select") {
      input = document.createElement("select");
      field.options.forEach(function(option){
        var opt = document.createElement("option");
        opt.value = option;
        opt.textContent = option;
        if (option === "medium") { opt.selected = true; }
        input.appendChild(opt);
      });
    } else {
      input = document.createElement("input");
      input.type = field.type;
    }
    input.name = field.name;
    label.appendChild(input);
    form.appendChild(label);
  });

  var button = document.createElement("button");
  button.type = "submit";
  button.textContent = "Send";
  form.appendChild(button);
  var status = document.createElement("div");
  status.className = "ticketd-status";
  form.appendChild(status);

  form.addEventListener("submit", function(event){
    event.preventDefault();
    var payload = {};
    new FormData(form).forEach(function(value, key){ payload[key] = value; });
    button.disabled = true;
    status.className = "ticketd-status";
    status.textContent = "Sending...";
    fetch(cfg.apiURL, {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(payload)
    }).then(function(res){
      return res.json().catch(function(){ return {}; }).then(function(data){
        if (!res.ok) { throw new Error(data.error || "Submission failed"); }
        status.className = "ticketd-status success";
        status.textContent = "Thanks! Your message was received.";
        form.reset();
      });
    }).catch(function(err){
      status.className = "ticketd-status error";
      status.textContent = err.message;
    }).then(function(){
      button.disabled = false;
    });
  });

  mount.appendChild(form);
})();
"""


def form_fields(form_type: FormType) -> List[Dict[str, Any]]:
    fields: List[Dict[str, Any]] = [
        {"label": "Name", "name": "name", "type": "text"},
        {"label": "Email", "name": "email", "type": "email"},
    ]
    if form_type == FormType.SUPPORT:
        fields.append({"label": "Subject", "name": "subject", "type": "text"})
        fields.append({"label": "Priority", "name": "priority", "type": "select", "options": PRIORITY_OPTIONS})
    elif form_type != FormType.CONTACT:
        raise InvalidInputError("form type", f"unsupported form type {form_type!r}", message="invalid form type")
    fields.append({"label": "Message", "name": "message", "type": "textarea"})
    return fields


def embed_config(form: FormResponse, client: ClientResponse, base_url: str) -> Dict[str, Any]:
    return {
        "cssURL": f"{base_url}/embed/form.css",
        "apiURL": f"{base_url}/api/forms/{form.id}/submit",
        "title": f"{client.name} - {form.name}",
        "fields": form_fields(form.type),
        "formType": form.type.value,
    }


def build_embed_script(form: FormResponse, client: ClientResponse, base_url: str) -> str:
    """Self-contained widget script for ``<script src=".../embed/{id}.js">``."""
    config = json.dumps(embed_config(form, client, base_url))
    # Keep "</script>" in a client or form name from closing an inline tag
    config = config.replace("</", "<\\/")
    return SCRIPT_TEMPLATE % config


def form_stylesheet() -> str:
    if settings.CUSTOM_CSS:
        try:
            with open(settings.CUSTOM_CSS, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            logger.warning(f"Custom CSS {settings.CUSTOM_CSS!r} unreadable, serving default: {e}")
    return DEFAULT_CSS
