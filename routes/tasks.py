from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session
from typing import List
from database import get_session
from errors import database_errors
from schemas import TaskCreate, TaskUpdate, TaskResponse, MessageResponse
from middleware.auth import verify_jwt_middleware, current_user_id
from services.tasks import TaskService

router = APIRouter()


def get_task_service(
    request: Request,
    session: Session = Depends(get_session)
) -> TaskService:
    """Task service scoped to the authenticated caller"""
    return TaskService(session, current_user_id(request))


@router.get(
    "/tasks",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=List[TaskResponse]
)
def list_tasks(service: TaskService = Depends(get_task_service)):
    """
    Get all tasks for authenticated user, newest first

    Args:
        service: Task service for the caller

    Returns:
        List of tasks
    """
    with database_errors("Failed to fetch tasks", "Task fetch error"):
        tasks = service.list()

    return [TaskResponse.model_validate(task) for task in tasks]


@router.post(
    "/tasks",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED
)
def create_task(
    task_data: TaskCreate,
    service: TaskService = Depends(get_task_service)
):
    """
    Create a new task

    Args:
        task_data: Task creation data
        service: Task service for the caller

    Returns:
        Created task
    """
    with database_errors("Failed to create task", "Task creation error"):
        task = service.create(task_data)

    return TaskResponse.model_validate(task)


@router.get(
    "/tasks/{task_id}",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=TaskResponse
)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Get task details"""
    with database_errors("Failed to fetch task", "Task fetch error"):
        task = service.get(task_id)

    return TaskResponse.model_validate(task)


@router.put(
    "/tasks/{task_id}",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=TaskResponse
)
def update_task(
    task_id: str,
    task_data: TaskUpdate,
    service: TaskService = Depends(get_task_service)
):
    """
    Replace a task's fields

    Args:
        task_id: Task ID
        task_data: Full set of task fields; omitted ones are cleared
        service: Task service for the caller

    Returns:
        Updated task
    """
    with database_errors("Failed to update task", "Task update error"):
        task = service.update(task_id, task_data)

    return TaskResponse.model_validate(task)


@router.patch(
    "/tasks/{task_id}/toggle",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=TaskResponse
)
def toggle_task_completion(task_id: str, service: TaskService = Depends(get_task_service)):
    """Toggle task completion status"""
    with database_errors("Failed to toggle task", "Task toggle error"):
        task = service.toggle(task_id)

    return TaskResponse.model_validate(task)


@router.delete(
    "/tasks/{task_id}",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=MessageResponse
)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Delete a task"""
    with database_errors("Failed to delete task", "Task deletion error"):
        service.delete(task_id)

    return MessageResponse(message="Task deleted successfully")
