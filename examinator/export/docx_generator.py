"""DOCX document generator for reviewing a finished quiz."""

from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor

from examinator.errors import InvalidTransitionError
from examinator.models.quiz import Question, QuizResult, ScoreBand
from examinator.session.state import QuizSession

BAND_COLORS = {
    ScoreBand.LOW: RGBColor(220, 38, 38),
    ScoreBand.FAIR: RGBColor(245, 158, 11),
    ScoreBand.GOOD: RGBColor(16, 185, 129),
    ScoreBand.EXCELLENT: RGBColor(79, 70, 229),
}
CORRECT_COLOR = RGBColor(0, 128, 0)
WRONG_COLOR = RGBColor(200, 0, 0)


def ensure_output_directory(output_dir: str = "output") -> Path:
    """
    Ensure the output directory exists.

    Args:
        output_dir: Directory path to create

    Returns:
        Path object for the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def generate_timestamped_filename(base_name: str, extension: str = "docx") -> str:
    """
    Generate a filename with timestamp.

    Args:
        base_name: Base name for the file
        extension: File extension (without dot)

    Returns:
        Filename with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # Clean the base name to remove any path components
    base_name = Path(base_name).stem
    return f"{base_name}_{timestamp}.{extension}"


def option_label(index: int) -> str:
    """Letter shown next to an option: A, B, C..."""
    return chr(ord("A") + index)


def export_review_to_docx(
    session: QuizSession,
    result: QuizResult,
    output_path: str,
    use_output_dir: bool = True,
    output_dir: str = "output",
) -> str:
    """
    Export a finished session with answers and explanations to a DOCX file.

    Args:
        session: Finished quiz session
        result: Result recorded for the session
        output_path: Path where the DOCX file should be saved
        use_output_dir: If True, saves to output directory with timestamp
        output_dir: Directory to save files in

    Returns:
        Path to the created DOCX file
    """
    if not session.is_finished:
        raise InvalidTransitionError("Only a finished session can be exported")

    if use_output_dir:
        output_dir_path = ensure_output_directory(output_dir)
        output_path = str(output_dir_path / generate_timestamped_filename(output_path))

    doc = Document()
    setup_document_styles(doc)

    title = doc.add_heading(result.topic, level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    score_para = doc.add_paragraph()
    score_run = score_para.add_run(f"Score: {result.score}/{result.total_questions}")
    score_run.bold = True
    score_run.font.size = Pt(16)
    score_run.font.color.rgb = BAND_COLORS[result.score_band]
    score_para.alignment = WD_ALIGN_PARAGRAPH.CENTER

    info_para = doc.add_paragraph(
        f"Difficulty: {result.difficulty.capitalize()}  |  "
        f"Completed: {result.date.strftime('%Y-%m-%d %H:%M')}"
    )
    info_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    info_para.runs[0].font.size = Pt(9)
    info_para.runs[0].font.color.rgb = RGBColor(128, 128, 128)

    doc.add_page_break()

    for i, (question, selected) in enumerate(zip(session.questions, session.answers), 1):
        add_question_to_document(doc, i, question, selected)

    doc.save(output_path)

    return output_path


def setup_document_styles(doc: Document) -> None:
    """
    Set up document-wide styles.

    Args:
        doc: Document to configure
    """
    style = doc.styles["Normal"]
    font = style.font
    font.name = "Calibri"
    font.size = Pt(11)

    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def add_question_to_document(
    doc: Document, number: int, question: Question, selected: int | None
) -> None:
    """
    Add one reviewed question to the document.

    Args:
        doc: Document to add to
        number: 1-based question number
        question: The question
        selected: Option the user chose, None if unanswered
    """
    q_para = doc.add_paragraph()
    q_run = q_para.add_run(f"Q{number}. ")
    q_run.bold = True
    q_run.font.size = Pt(12)
    q_para.add_run(question.question)

    for index, option in enumerate(question.options):
        opt_para = doc.add_paragraph(f"   {option_label(index)}. {option}")
        opt_para.paragraph_format.left_indent = Inches(0.5)

        if index == question.correct_index:
            opt_para.runs[0].bold = True
            opt_para.runs[0].font.color.rgb = CORRECT_COLOR
            opt_para.add_run(" ✓").font.color.rgb = CORRECT_COLOR
        elif index == selected:
            opt_para.runs[0].font.color.rgb = WRONG_COLOR
            opt_para.add_run(" ✗").font.color.rgb = WRONG_COLOR

    answer_para = doc.add_paragraph()
    answer_para.paragraph_format.left_indent = Inches(0.5)
    if selected is None:
        answer_para.add_run("Not answered").italic = True
    else:
        verdict = "Correct" if selected == question.correct_index else "Incorrect"
        answer_run = answer_para.add_run(
            f"Your answer: {option_label(selected)} ({verdict})"
        )
        answer_run.font.color.rgb = (
            CORRECT_COLOR if selected == question.correct_index else WRONG_COLOR
        )

    if question.explanation:
        exp_para = doc.add_paragraph()
        exp_para.paragraph_format.left_indent = Inches(0.5)
        exp_run = exp_para.add_run(f"Explanation: {question.explanation}")
        exp_run.italic = True
        exp_run.font.size = Pt(10)
        exp_run.font.color.rgb = RGBColor(64, 64, 64)

    # Add spacing between questions
    doc.add_paragraph()
