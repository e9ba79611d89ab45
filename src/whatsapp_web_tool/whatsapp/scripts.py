"""JavaScript evaluated inside WhatsApp Web.

The scripts only serialize what they find into plain objects; every decision
about titles, previews, senders and limits is made in Python on the returned
data (see :mod:`whatsapp_web_tool.whatsapp.extractors`).
"""

DISMISS_DIALOG = """
(args) => {
  const buttons = Array.from(document.querySelectorAll(args.buttons));
  for (const button of buttons) {
    const text = button.textContent || "";
    const label = args.labels.find((candidate) => text.includes(candidate));
    if (label) {
      button.click();
      return label;
    }
  }
  return null;
}
"""

CHAT_LIST_SNAPSHOT = """
(args) => args.containers.map((selector) => {
  const rows = Array.from(document.querySelectorAll(selector));
  return {
    selector,
    count: rows.length,
    rows: rows.slice(0, args.limit).map((row) => {
      const titleEl = row.querySelector(args.title);
      return {
        has_title: !!titleEl,
        title_attr: titleEl ? titleEl.getAttribute("title") : null,
        title_text: titleEl ? (titleEl.textContent || "").trim() : null,
        texts: Array.from(row.querySelectorAll(args.preview)).map(
          (el) => (el.textContent || "").trim()
        ),
      };
    }),
  };
})
"""

MESSAGE_SNAPSHOT = """
(args) => {
  const main = document.querySelector(args.main);
  if (!main) return null;
  return args.rows.map((selector) => ({
    selector,
    rows: Array.from(main.querySelectorAll(selector)).map((row) => {
      const textEl = row.querySelector(args.text);
      const fallbackEl = row.querySelector(args.fallback);
      const metaEl = row.querySelector("[" + args.metaAttribute + "]");
      return {
        text: (row.textContent || "").trim(),
        class_name: typeof row.className === "string" ? row.className : "",
        has_text_node: !!row.querySelector(args.marker),
        text_node: textEl ? (textEl.textContent || "").trim() : null,
        fallback_text: fallbackEl ? (fallbackEl.textContent || "").trim() : null,
        pre_plain_text: metaEl ? metaEl.getAttribute(args.metaAttribute) : null,
        has_incoming: !!row.querySelector("." + args.incoming),
        has_outgoing: !!row.querySelector("." + args.outgoing),
      };
    }),
  }));
}
"""
