# --- rlayout_lib/pdf_source.py ---
"""
rlayout_lib/pdf_source.py: Decodes a PDF file into per-page engine input
using pdfminer.six.

Text comes from pdfminer's layout analysis (LTChar glyphs grouped into
word-level runs). Graphics come from a PDFPageInterpreter subclass that
records the color, line-width, path and painting operators it executes.
"""
import logging
import os
from typing import List, Optional, Set

from pdfminer.converter import PDFPageAggregator
from pdfminer.layout import LAParams, LTAnno, LTChar, LTTextLine
from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
from pdfminer.pdfpage import PDFPage
from pdfminer.psparser import PSException
from pdfminer.utils import apply_matrix_pt

from .colors import cmyk_to_rgb
from .exceptions import PdfDecodeError
from .models import Operator, OperatorCode, PageInput

log_pdf = logging.getLogger("rlayout.pdf")


def _number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _color_components(color) -> tuple:
    """Flattens a pdfminer color value (number, tuple or None) into floats."""
    if color is None:
        return ()
    if isinstance(color, (int, float)):
        color = (color,)
    try:
        values = tuple(_number(v) for v in color)
    except TypeError:
        return ()
    return () if None in values else values


class RecordingInterpreter(PDFPageInterpreter):
    """
    A PDFPageInterpreter that logs graphics operators as engine Operators
    before letting pdfminer execute them. Path coordinates are mapped
    through the current transformation matrix into page space.

    Path construction (m, l, re) is held back until a painting operator
    arrives, so paths that only end in a clip (`W n`) or a bare `n` are
    never recorded.
    """

    def __init__(self, rsrcmgr, device, operators: List[Operator] = None):
        super().__init__(rsrcmgr, device)
        self.operators = operators if operators is not None else []
        self.pending_path: List[Operator] = []

    def dup(self):
        # Form XObjects render through a duplicate; keep recording into one list.
        return self.__class__(self.rsrcmgr, self.device, self.operators)

    def process_page(self, page):
        self.operators.clear()
        self.pending_path = []
        super().process_page(page)

    def _operator(self, opcode: OperatorCode, *args) -> Optional[Operator]:
        values = tuple(_number(a) for a in args)
        if None in values:
            log_pdf.debug("Ignoring %s with non-numeric operands %r", opcode.value, args)
            return None
        return Operator(opcode, values)

    def _record(self, opcode: OperatorCode, *args):
        op = self._operator(opcode, *args)
        if op is not None:
            self.operators.append(op)

    def _record_point(self, opcode: OperatorCode, x, y):
        if _number(x) is None or _number(y) is None:
            return
        op = self._operator(opcode, *apply_matrix_pt(self.ctm, (float(x), float(y))))
        if op is not None:
            self.pending_path.append(op)

    def _paint(self, opcode: OperatorCode):
        self.operators.extend(self.pending_path)
        self.pending_path = []
        self.operators.append(Operator(opcode))

    # --- Colors ---
    def do_RG(self, r, g, b):
        self._record(OperatorCode.SET_STROKE_RGB, r, g, b)
        super().do_RG(r, g, b)

    def do_rg(self, r, g, b):
        self._record(OperatorCode.SET_FILL_RGB, r, g, b)
        super().do_rg(r, g, b)

    def do_G(self, gray):
        self._record(OperatorCode.SET_STROKE_GRAY, gray)
        super().do_G(gray)

    def do_g(self, gray):
        self._record(OperatorCode.SET_FILL_GRAY, gray)
        super().do_g(gray)

    def do_K(self, c, m, y, k):
        values = [_number(v) for v in (c, m, y, k)]
        if None not in values:
            self._record(OperatorCode.SET_STROKE_RGB, *cmyk_to_rgb(*values))
        super().do_K(c, m, y, k)

    def do_k(self, c, m, y, k):
        values = [_number(v) for v in (c, m, y, k)]
        if None not in values:
            self._record(OperatorCode.SET_FILL_RGB, *cmyk_to_rgb(*values))
        super().do_k(c, m, y, k)

    def do_SC(self):
        super().do_SC()
        self._record_color_n(OperatorCode.SET_STROKE_COLOR_N, self.graphicstate.scolor)

    def do_SCN(self):
        super().do_SCN()
        self._record_color_n(OperatorCode.SET_STROKE_COLOR_N, self.graphicstate.scolor)

    def do_sc(self):
        super().do_sc()
        self._record_color_n(OperatorCode.SET_FILL_COLOR_N, self.graphicstate.ncolor)

    def do_scn(self):
        super().do_scn()
        self._record_color_n(OperatorCode.SET_FILL_COLOR_N, self.graphicstate.ncolor)

    def _record_color_n(self, opcode: OperatorCode, color):
        values = _color_components(color)
        if values:
            self.operators.append(Operator(opcode, values))

    # --- Line width and paths ---
    def do_w(self, linewidth):
        self._record(OperatorCode.SET_LINE_WIDTH, linewidth)
        super().do_w(linewidth)

    def do_m(self, x, y):
        self._record_point(OperatorCode.MOVE_TO, x, y)
        super().do_m(x, y)

    def do_l(self, x, y):
        self._record_point(OperatorCode.LINE_TO, x, y)
        super().do_l(x, y)

    def do_re(self, x, y, w, h):
        values = [_number(v) for v in (x, y, w, h)]
        if None not in values:
            x0, y0 = apply_matrix_pt(self.ctm, (values[0], values[1]))
            x1, y1 = apply_matrix_pt(self.ctm, (values[0] + values[2], values[1] + values[3]))
            op = self._operator(OperatorCode.RECTANGLE, x0, y0, x1 - x0, y1 - y0)
            if op is not None:
                self.pending_path.append(op)
        super().do_re(x, y, w, h)

    # --- Painting ---
    def do_S(self):
        self._paint(OperatorCode.STROKE_PATH)
        super().do_S()

    def do_s(self):
        self._paint(OperatorCode.STROKE_PATH)
        super().do_s()

    def do_f(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_f()

    def do_F(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_F()

    def do_f_a(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_f_a()

    def do_B(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_B()

    def do_B_a(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_B_a()

    def do_b(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_b()

    def do_b_a(self):
        self._paint(OperatorCode.FILL_PATH)
        super().do_b_a()

    def do_n(self):
        # End of a clipping or no-op path: nothing was drawn.
        self.pending_path = []
        super().do_n()


def _find_elements_by_type(obj, t):
    """Recursively finds all layout elements of a specific type."""
    e = []
    if isinstance(obj, t):
        e.append(obj)
    if hasattr(obj, "_objs"):
        for child in obj:
            e.extend(_find_elements_by_type(child, t))
    return e


def _run_to_token(chars: List[LTChar]) -> dict:
    first = chars[0]
    graphicstate = getattr(first, "graphicstate", None)
    color = _color_components(getattr(graphicstate, "ncolor", None))
    return {
        "text": "".join(c.get_text() for c in chars),
        "transform": list(first.matrix),
        "fontRef": first.fontname,
        "width": max(0.0, chars[-1].x1 - first.matrix[4]),
        "height": first.size,
        "color": list(color) or None,
    }


def text_tokens_from_layout(layout) -> List[dict]:
    """
    Groups the glyphs of each text line into word-level runs.

    A run ends at whitespace, at an LTAnno (pdfminer's inferred space) and at
    a change of font or size.
    """
    tokens = []
    for line in _find_elements_by_type(layout, LTTextLine):
        run: List[LTChar] = []
        for item in line:
            if isinstance(item, LTAnno) or not isinstance(item, LTChar):
                if run:
                    tokens.append(_run_to_token(run))
                run = []
                continue
            if not item.get_text().strip():
                if run:
                    tokens.append(_run_to_token(run))
                run = []
                continue
            if run and (item.fontname != run[-1].fontname or item.size != run[-1].size):
                tokens.append(_run_to_token(run))
                run = []
            run.append(item)
        if run:
            tokens.append(_run_to_token(run))
    return tokens


def read_pdf_pages(pdf_path: str, pages_to_process: Set[int] = None) -> List[PageInput]:
    """
    Decodes the selected pages (1-based numbers, all when None) of a PDF.

    Raises:
        FileNotFoundError: If the file does not exist.
        PdfDecodeError: If pdfminer cannot parse the file.
    """
    if not os.path.exists(pdf_path):
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    rsrcmgr = PDFResourceManager()
    device = PDFPageAggregator(rsrcmgr, laparams=LAParams())
    interpreter = RecordingInterpreter(rsrcmgr, device)
    pages = []
    try:
        with open(pdf_path, "rb") as fp:
            for page_number, page in enumerate(PDFPage.get_pages(fp), start=1):
                if pages_to_process is not None and page_number not in pages_to_process:
                    continue
                interpreter.process_page(page)
                layout = device.get_result()
                tokens = text_tokens_from_layout(layout)
                log_pdf.info(
                    "Page %d: %d text runs, %d graphics operators.",
                    page_number,
                    len(tokens),
                    len(interpreter.operators),
                )
                pages.append(
                    PageInput(
                        page_number=page_number,
                        width=layout.width,
                        height=layout.height,
                        text_tokens=tokens,
                        operators=list(interpreter.operators),
                    )
                )
    except PSException as e:
        raise PdfDecodeError(f"Failed to decode PDF: {e}", pdf_path) from e
    return pages
