"""
Main application for the dispute assistant
"""
import asyncio
import os
import socket
import sys
from dotenv import load_dotenv

from models.case_state import Phase
from services.service_factory import ServiceFactory
from utils.case_export import EXPORT_FILENAME
from utils.logging_config import init_logging, get_logger, console_print

load_dotenv()

init_logging()
logger = get_logger('app')

COMMANDS = {
    '/summary': 'Review the case summary once the assistant has captured it',
    '/edit': 'Replace the case summary text',
    '/save': 'Save the edited summary',
    '/cancel': 'Discard the edited summary',
    '/back': 'Return to the conversation',
    '/analyze': 'Submit the case for analysis',
    '/resolve': 'Retry building the resolution from the current decision',
    '/export': f'Write the case summary to {EXPORT_FILENAME}',
    '/quit': 'Leave the assistant',
}


def is_port_in_use(port: int, host: str = '127.0.0.1') -> bool:
    """
    Check if a port is already in use
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(1)
            return sock.connect_ex((host, port)) == 0
    except OSError:
        return False


def start_api_server():
    """
    Start the FastAPI server
    """
    import uvicorn

    console_print("Starting Dispute Assistant API Server", "SUCCESS")
    logger.info("Starting Dispute Assistant API Server")

    host = os.getenv('API_HOST', '0.0.0.0')
    port = int(os.getenv('API_PORT', 8003))

    if is_port_in_use(port):
        console_print(f"API server is already running on port {port}", "WARNING")
        logger.warning(f"API server is already running on port {port}")
        return

    console_print(f"Server will start on: http://{host}:{port}", "SUCCESS")
    console_print(f"API Documentation: http://{host}:{port}/docs", "SUCCESS")
    logger.info(f"Server starting on: http://{host}:{port}")

    try:
        uvicorn.run("api.main:app", host=host, port=port, log_level="info")
    except Exception as e:
        logger.error(f"Error starting API server: {e}")
        console_print(f"Error starting API server: {e}", "ERROR")


def print_transcript_tail(transcript, shown: int) -> int:
    """Print the messages added since the last call"""
    messages = transcript.messages
    for message in messages[shown:]:
        console_print(message.content, "USER" if message.role.value == 'user' else "AGENT")
    return len(messages)


def print_summary(session):
    result = session.state.conversation_result
    if result is None:
        return
    details = result.transaction_details
    console_print(f"Case Summary: {result.case_summary}", "INFO")
    console_print(
        f"Transaction: {details.date} | ${details.amount:.2f} | {details.merchant} | {details.description}",
        "INFO"
    )
    console_print(f"Dispute Reason: {result.dispute_reason}", "INFO")


def print_resolution(session):
    resolution = session.state.resolution_result
    if resolution is None:
        return
    console_print(f"Decision: {resolution.decision_type.upper()}", "SUCCESS")
    console_print(resolution.decision_summary, "INFO")
    console_print(resolution.detailed_explanation, "INFO")
    for step in resolution.next_steps:
        console_print(f"{step.step_number}. {step.action} ({step.timeline})", "INFO")


async def run_console_case():
    """
    Walk one dispute case through the console
    """
    registry = ServiceFactory.get_session_registry()
    session = registry.create_session()
    console_print(f"Case {session.case_id} opened. Type /help for commands.", "SUCCESS")

    shown = print_transcript_tail(session.state.intake_transcript, 0)
    resolution_shown = 0

    while True:
        try:
            line = await asyncio.to_thread(input, '> ')
        except (EOFError, KeyboardInterrupt):
            line = '/quit'
        line = line.strip()
        if not line:
            continue

        if line == '/quit':
            console_print("Goodbye", "INFO")
            break
        elif line == '/help':
            for command, description in COMMANDS.items():
                console_print(f"  {command:<10} {description}", "INFO")
        elif line == '/summary':
            if session.advance_to_summary():
                print_summary(session)
            else:
                console_print("The case summary is not ready yet", "WARNING")
        elif line.startswith('/edit'):
            text = line[len('/edit'):].strip()
            if session.begin_edit() and (not text or session.edit_summary(text)):
                console_print("Summary draft updated; /save to keep it or /cancel to discard it", "INFO")
            else:
                console_print("The summary can only be edited while reviewing it", "WARNING")
        elif line == '/save':
            if session.save_summary():
                print_summary(session)
            else:
                console_print("Nothing to save", "WARNING")
        elif line == '/cancel':
            if not session.cancel_edit():
                console_print("No edit in progress", "WARNING")
        elif line == '/back':
            if not session.return_to_conversation():
                console_print("Already in the conversation", "WARNING")
        elif line == '/analyze':
            if not session.can_submit_for_analysis():
                console_print("Review the summary before submitting it", "WARNING")
                continue
            console_print("Analyzing your dispute...", "INFO")
            await session.submit_for_analysis()
            report_analysis(session)
        elif line == '/resolve':
            await session.generate_resolution()
            report_analysis(session)
        elif line == '/export':
            document = session.export_summary()
            if document is None:
                console_print("The case has no resolution to export yet", "WARNING")
                continue
            with open(EXPORT_FILENAME, 'w') as export_file:
                export_file.write(document)
            console_print(f"Case summary written to {EXPORT_FILENAME}", "SUCCESS")
        elif line.startswith('/'):
            console_print(f"Unknown command {line}", "WARNING")
        elif session.phase == Phase.CONVERSATION:
            await session.submit_user_turn(line)
        elif session.phase == Phase.RESOLUTION:
            await session.ask_question(line)
        else:
            console_print(f"Messages are not accepted in the {session.phase.value} phase", "WARNING")

        shown = print_transcript_tail(session.state.intake_transcript, shown)
        resolution_shown = print_transcript_tail(session.state.resolution_transcript, resolution_shown)


def report_analysis(session):
    if session.phase == Phase.RESOLUTION:
        print_resolution(session)
        console_print("Ask any questions about the decision, or /export the summary.", "INFO")
    elif session.state.last_error is not None:
        console_print(f"{session.state.progress_step} {session.state.last_error.message}", "ERROR")


def print_usage():
    """
    Print usage information
    """
    console_print("Usage:", "INFO")
    console_print("  python app.py          - Start an interactive dispute case", "INFO")
    console_print("  python app.py --api    - Start FastAPI server", "INFO")
    console_print("  python app.py --server - Start FastAPI server (alias)", "INFO")
    console_print("  python app.py --help   - Show this help message", "INFO")


if __name__ == "__main__":
    if len(sys.argv) == 1:
        asyncio.run(run_console_case())
    elif sys.argv[1] in ['--help', '-h']:
        print_usage()
    elif sys.argv[1] in ['--api', '--server']:
        start_api_server()
    else:
        console_print(f"Unknown argument {sys.argv[1]}", "ERROR")
        print_usage()
